# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Engine configuration."""

from roleplay_server import database
from roleplay_server.config import settings


def test_engine_follows_settings():
    assert database.engine.echo == settings.database_echo
    assert database.engine.pool.size() == settings.database_pool_size
    assert database.engine.url.render_as_string(hide_password=False) == settings.database_url
