from .gateway import MockUnifiedOrderGateway

__all__ = ["MockUnifiedOrderGateway"]
