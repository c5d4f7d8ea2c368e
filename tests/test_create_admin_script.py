import pytest

from scripts.create_admin import create_admin


@pytest.mark.asyncio
@pytest.mark.parametrize("password, message", [
    ("short", "at least 6 characters"),
    ("x" * 73, "at most 72 bytes"),
])
async def test_create_admin_rejects_password_out_of_bounds(password, message):
    with pytest.raises(ValueError, match=message):
        await create_admin("root_admin", "root@example.com", password)
