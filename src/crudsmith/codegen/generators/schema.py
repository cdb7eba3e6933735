"""
Prisma schema generator.

Generates:
- prisma/schema.prisma
"""

from ...prisma.generator import render_schema
from ..base import Generator, GeneratorResult


class PrismaSchemaGenerator(Generator):
    """Generates the Prisma schema from the app's interfaces."""

    name = "schema"

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        schema = self.schema

        if not schema.models:
            result.add_error("No interfaces to generate models from")
            return result

        content = render_schema(schema, source=self.config.paths.types)
        self._write_file(self.resolve("schema"), content, result)
        result.add_artifact("model_names", schema.model_names)
        return result
