"""Interactive model chat with local tool calling for OpenStack on OpenShift."""

__version__ = "0.1.0"