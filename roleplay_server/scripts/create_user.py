#!/usr/bin/env python3
# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Create a user account. Run: python -m roleplay_server.scripts.create_user"""

import asyncio
import getpass
import sys

from roleplay_server.database import async_session_maker, init_db
from roleplay_server.errors import Conflict
from roleplay_server.services.users import register_user


async def main():
    await init_db()
    username = input("Username: ").strip()
    email = input("Email: ").strip()
    password = getpass.getpass("Password: ")
    if not username or not email or not password:
        print("All fields required")
        sys.exit(1)

    async with async_session_maker() as session:
        try:
            await register_user(session, username=username, email=email, password=password)
        except Conflict as e:
            print(e.message)
            sys.exit(1)
        await session.commit()
        print("User created.")


if __name__ == "__main__":
    asyncio.run(main())
