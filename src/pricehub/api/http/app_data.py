from dataclasses import dataclass

from src.pricehub.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
)


@dataclass
class ApplicationDependencies:
    jwt_verify_service: JwtVerificationService
    jwt_generation_service: JwtGeneratorService
    database_service: DbSessionService
