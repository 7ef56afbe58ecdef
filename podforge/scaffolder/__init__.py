"""Template materialisation: token substitution, identity and variants.

Quick usage::

    from podforge.models import Language, Platform
    from podforge.scaffolder import select_variant, substitute_tokens

    strategy = select_variant(Platform.IOS, Language.SWIFT)
    text = substitute_tokens("Hello ${POD_NAME}", {"POD_NAME": "MyLib"})
"""

from podforge.scaffolder.identity import Identity, resolve_identity
from podforge.scaffolder.substitution import (
    build_substitution_map,
    inject_fragment,
    substitute_file,
    substitute_files,
    substitute_tokens,
)
from podforge.scaffolder.variants import (
    VARIANTS,
    IOSObjCVariant,
    IOSSwiftVariant,
    MacOSSwiftVariant,
    VariantStrategy,
    choose_variant,
    select_variant,
)

__all__ = [
    "IOSObjCVariant",
    "IOSSwiftVariant",
    "Identity",
    "MacOSSwiftVariant",
    "VARIANTS",
    "VariantStrategy",
    "build_substitution_map",
    "choose_variant",
    "inject_fragment",
    "resolve_identity",
    "select_variant",
    "substitute_file",
    "substitute_files",
    "substitute_tokens",
]
