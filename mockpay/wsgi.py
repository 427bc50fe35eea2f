# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from mockpay.app import create_app

app = create_app()
