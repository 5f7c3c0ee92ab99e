from packy.utilities.config import CONFIG_DIR

# Layout of a config directory holding templates
MANIFEST_FILENAME = 'template-manifest.json'
TEMPLATES_DIRNAME = 'templates'

__all__ = ['CONFIG_DIR', 'MANIFEST_FILENAME', 'TEMPLATES_DIRNAME']
