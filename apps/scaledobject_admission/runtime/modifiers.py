from apps.scaledobject_admission.models.scaledobject_models import ScaledObjectSpec


def is_using_modifiers(spec: ScaledObjectSpec) -> bool:
    """True when spec.advanced.scalingModifiers has any field set."""
    return spec.advanced is not None and spec.advanced.scalingModifiers.is_configured
