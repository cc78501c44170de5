"""SEO Monitor: project wizard, record store and dashboard data for SEO monitoring."""

__version__ = "1.0.0"
