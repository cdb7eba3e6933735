"""
App generators.

Each generator is responsible for one part of the generated app:
- PrismaSchemaGenerator: prisma/schema.prisma
- PrismaServiceGenerator: shared Prisma client and CRUD helpers
- ApiRoutesGenerator: App Router CRUD handlers and the status route
- HooksGenerator: fetch-based React hooks and their index
- AuthGenerator: session auth over the User model
- EnvFileGenerator: .env keys
- NextConfigGenerator: next.config.js
- SystemGenerator: all of the above
"""

from .auth import AuthGenerator
from .env import EnvFileGenerator
from .hooks import HooksGenerator
from .next_config import NextConfigGenerator
from .routes import ApiRoutesGenerator
from .schema import PrismaSchemaGenerator
from .service import PrismaServiceGenerator
from .system import GENERATOR_CLASSES, SystemGenerator

__all__ = [
    "PrismaSchemaGenerator",
    "PrismaServiceGenerator",
    "ApiRoutesGenerator",
    "HooksGenerator",
    "AuthGenerator",
    "EnvFileGenerator",
    "NextConfigGenerator",
    "SystemGenerator",
    "GENERATOR_CLASSES",
]
