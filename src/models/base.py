"""Declarative base and identifier helpers shared by all models."""

import secrets

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Identifiers are 24 lowercase hex characters
ID_BYTES = 12


def generate_id() -> str:
    return secrets.token_hex(ID_BYTES)
