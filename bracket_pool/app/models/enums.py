from enum import StrEnum

class LockState(StrEnum):
    OPEN = "OPEN"
    LOCKED = "LOCKED"

class UserRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"

class SeedingMode(StrEnum):
    SEEDED = "seeded"
    RANDOM = "random"
