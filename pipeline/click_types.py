"""Click Custom Types for Pipeline CLI

Domain-specific type validators for Click commands.
Provides early validation at CLI parsing time with clear error messages.
"""

import click

from vendors.factory import VENDOR_ADAPTERS


class ExtractorKeyType(click.ParamType):
    """Validates an extractor key against the adapter registry

    Valid examples:
    - veracode
    - veracode_rss
    - sdelements

    Matching is case-insensitive; the registry key is returned.
    """

    name = "extractor"

    def convert(self, value, param, ctx):
        """Validate extractor key at CLI parse time

        Args:
            value: User-provided extractor key
            param: Click parameter object
            ctx: Click context

        Returns:
            Registered extractor key

        Raises:
            click.BadParameter: If the key is not registered
        """
        if not value:
            self.fail("extractor cannot be empty", param, ctx)

        key = value.strip().lower()
        if key not in VENDOR_ADAPTERS:
            self.fail(
                f'{value!r} is not a registered extractor. '
                f'Available: {", ".join(sorted(VENDOR_ADAPTERS))}',
                param,
                ctx
            )

        return key


EXTRACTOR = ExtractorKeyType()
