"""Authentication: profiles, JWT issuance and role checks."""
