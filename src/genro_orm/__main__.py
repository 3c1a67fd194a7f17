# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CLI entry point for genro-orm.

Usage:
    python -m genro_orm --help
    python -m genro_orm ddl myapp.models:User --dialect postgresql
"""

from .cli import main

if __name__ == "__main__":
    main()
