from billing.demo.default_catalog import seed_default_catalog

__all__ = ["seed_default_catalog"]
