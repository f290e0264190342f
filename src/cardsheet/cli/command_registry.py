#!/usr/bin/env python3
from __future__ import annotations

import typer

from .commands import (
    config as config_command,
    generate as generate_command,
    info as info_command,
    sample as sample_command,
    template as template_command,
    validate as validate_command,
)


def register(app: typer.Typer) -> None:
    generate_command.register(app)
    validate_command.register(app)
    template_command.register(app)
    sample_command.register(app)
    info_command.register(app)
    config_command.register(app)
