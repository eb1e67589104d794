"""Devmart agency website backend: public content API and admin CMS."""
