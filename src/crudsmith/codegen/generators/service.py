"""
Prisma service generator.

Generates:
- src/lib/prisma-service.ts (shared client plus CRUD helpers per model)
"""

from ..base import Generator, GeneratorResult
from ..templating import ModelContext, render


class PrismaServiceGenerator(Generator):
    """Generates the shared Prisma client module."""

    name = "service"

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        strategy = self.config.schema_settings.id_strategy
        models = [ModelContext.from_model(m, strategy) for m in self.schema.models]

        content = render("lib/prisma-service.ts.j2", models=models, source=self.config.paths.types)
        self._write_file(self.resolve("service"), content, result)
        result.add_artifact("service_functions", _function_names(models))
        return result


def _function_names(models: list[ModelContext]) -> list[str]:
    names = []
    for m in models:
        names.extend(
            [
                f"get{m.name}ById",
                f"getAll{m.plural}",
                f"create{m.name}",
                f"update{m.name}",
                f"delete{m.name}",
            ]
        )
    return names
