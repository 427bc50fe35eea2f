# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import AppConfig, JwtConfig, PaymentsConfig, load_config

__all__ = ["AppConfig", "JwtConfig", "PaymentsConfig", "load_config"]
