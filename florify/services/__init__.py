from florify.services.marketplace import Marketplace

__all__ = ["Marketplace"]
