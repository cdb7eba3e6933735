"""
Next.js configuration generator.

Generates:
- next.config.js with barrel optimisation disabled, package aliases and the
  ``__barrel_optimize__`` warning filter
"""

from ..base import Generator, GeneratorResult
from ..templating import render

OTHER_CONFIG_NAMES = ("next.config.mjs", "next.config.ts")


class NextConfigGenerator(Generator):
    """Generates next.config.js; the previous file is backed up."""

    name = "next-config"

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        path = self.resolve("next_config")
        settings = self.config.next

        content = render(
            "next/next.config.js.j2",
            alias_packages=settings.alias_packages,
            redirects=settings.redirects,
        )
        self._write_file(path, content, result)

        for other in OTHER_CONFIG_NAMES:
            candidate = path.parent / other
            if candidate != path and candidate.exists():
                result.add_warning(f"{other} also exists and may take precedence over {path.name}")

        return result
