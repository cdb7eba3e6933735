"""
React hooks generator.

Generates:
- src/hooks/use<Plural>.ts for every model
- src/hooks/index.ts re-exporting them
"""

from ..base import Generator, GeneratorResult
from ..templating import ModelContext, render


class HooksGenerator(Generator):
    """Generates fetch-based data hooks over the generated API routes."""

    name = "hooks"

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        hooks_dir = self.resolve("hooks_dir")
        strategy = self.config.schema_settings.id_strategy

        models = []
        for model in self.schema.models:
            m = ModelContext.from_model(model, strategy)
            content = render("hooks/hook.ts.j2", m=m, source=self.config.paths.types)
            self._write_file(hooks_dir / f"{m.hook}.ts", content, result)
            models.append(m)

        self._write_file(hooks_dir / "index.ts", render("hooks/index.ts.j2", models=models), result)
        result.add_artifact("hooks", [m.hook for m in models])
        return result
