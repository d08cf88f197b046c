# Collaborator ports
from .catalog import ProductLookup, DesignLookup
from .pricing_configuration import PricingConfiguration
from .preview_image_store import PreviewImageStore

__all__ = ['ProductLookup', 'DesignLookup', 'PricingConfiguration', 'PreviewImageStore']
