"""Admin content management: pages, services, projects, blog posts, FAQs and contact submissions."""
