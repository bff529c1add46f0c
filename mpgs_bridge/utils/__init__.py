"""
Utility modules for the 3DS bridge
"""
from .config_loader import ServerConfig, load_server_config
from .masking import mask_card_number, mask_sensitive_data

__all__ = [
    'ServerConfig',
    'load_server_config',
    'mask_card_number',
    'mask_sensitive_data',
]
