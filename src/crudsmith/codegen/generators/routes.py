"""
API route generator.

Generates:
- src/app/api/<segment>/route.ts for every model
- src/app/api/status/route.ts
"""

from ...core.ir import IdStrategy
from ..base import Generator, GeneratorResult
from ..templating import ModelContext, render


class ApiRoutesGenerator(Generator):
    """Generates CRUD route handlers for the App Router."""

    name = "routes"

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        api_dir = self.resolve("api_dir")
        strategy = self.config.schema_settings.id_strategy
        numeric_ids = strategy is IdStrategy.AUTOINCREMENT

        segments = []
        for model in self.schema.models:
            m = ModelContext.from_model(model, strategy)
            content = render("api/route.ts.j2", m=m, numeric_ids=numeric_ids, source=self.config.paths.types)
            self._write_file(api_dir / m.segment / "route.ts", content, result)
            segments.append(m.segment)

        status = render("api/status.ts.j2", model_names=self.schema.model_names)
        self._write_file(api_dir / "status" / "route.ts", status, result)

        result.add_artifact("api_segments", segments)
        return result
