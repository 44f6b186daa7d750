class CatalogAdminError(Exception):
    """Base Exception Class"""
    pass


class ConfigurationError(CatalogAdminError):
    """Missing or invalid environment configuration"""

    code: str = "CONFIGURATION"
