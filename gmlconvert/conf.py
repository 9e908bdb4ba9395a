from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver

_originals = {}


def _get_setting(name, default):
    # Allow using the library outside a configured Django project.
    if not settings.configured:
        return default
    return getattr(settings, name, default)


# -- parsing

# The number of ordinates per position when no srsDimension attribute is given.
GMLCONVERT_DEFAULT_SRS_DIMENSION = _get_setting("GMLCONVERT_DEFAULT_SRS_DIMENSION", 2)

# The version to assume when a GML namespace is found, but not recognized.
GMLCONVERT_FALLBACK_VERSION = _get_setting("GMLCONVERT_FALLBACK_VERSION", "3.2")

# Whether a partial trailing tuple or mixed tuple sizes raise MalformedCoordinates.
# This includes positions that don't match their declared srsDimension.
# Otherwise, the incomplete tuple is dropped and a warning is logged.
GMLCONVERT_STRICT_COORDINATES = _get_setting("GMLCONVERT_STRICT_COORDINATES", True)

# Whether <gml:Envelope> and <gml:Box> should reject minX > maxX or minY > maxY.
# By default, inverted boxes are preserved as-is.
GMLCONVERT_VALIDATE_BBOX = _get_setting("GMLCONVERT_VALIDATE_BBOX", False)

# -- output rendering

# The indent used for each level when pretty printing is requested.
GMLCONVERT_INDENT = _get_setting("GMLCONVERT_INDENT", "  ")


@receiver(setting_changed)
def _on_settings_change(setting, value, enter, **kwargs):
    if not setting.startswith("GMLCONVERT_"):
        return

    conf_module = globals()
    if value is None and not enter:
        # override_settings().disable() returns what the django settings module had.
        # Revert to our defaults here instead.
        value = _originals.get(setting)
    else:
        # Track defaults of this file for reverting to them
        _originals.setdefault(setting, conf_module[setting])

    conf_module[setting] = value
