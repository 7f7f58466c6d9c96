#!/usr/bin/env python
"""
Django management entrypoint for the cafe accounting backend.

backend.settings is a package that loads nothing, so an unset or
package-level DJANGO_SETTINGS_MODULE is pointed at backend.settings.dev.
Production sets backend.settings.prod explicitly.
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"


def main() -> None:
    if (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip() in ("", "backend.settings"):
        os.environ["DJANGO_SETTINGS_MODULE"] = DEFAULT_SETTINGS

    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
