from .settings_pricing_configuration import SettingsPricingConfiguration

__all__ = ['SettingsPricingConfiguration']
