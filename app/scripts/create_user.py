"""
Create a user (e.g. first admin) directly in the user data file. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--role ROLE] [--name NAME] [--email EMAIL] [--age AGE]
Example:
  python -m app.scripts.create_user admin 'Secure-Passw0rd' --role ADMIN

Stop the API first: two processes must not write the same data file.
"""
import argparse
import logging
import re
import sys

from app.core.config import get_settings
from app.core.security import hash_password
from app.models.user import Role, UserRecord
from app.schemas.user import USERNAME_PATTERN, validate_password_strength
from app.services.user_store import DuplicateIdentifierError, UserStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a user account in the user data file.")
    parser.add_argument("username", help="Username (3-50 chars: letters, numbers, underscores)")
    parser.add_argument("password", help="Password (8-128 chars, mixed case and a digit)")
    parser.add_argument(
        "--role",
        default=Role.USER.value,
        type=str.upper,
        choices=[r.value for r in Role],
    )
    parser.add_argument("--name", default=None, help="Display name (defaults to username)")
    parser.add_argument("--email", default=None)
    parser.add_argument("--age", type=int, default=None)
    parser.add_argument("--data-file", default=None, help="Override USER_DATA_FILE")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    username = args.username.strip()
    if not (3 <= len(username) <= 50) or not re.fullmatch(USERNAME_PATTERN, username):
        print("Invalid username: 3-50 letters, numbers or underscores.", file=sys.stderr)
        return 1
    if not (8 <= len(args.password) <= 128):
        print("Password must be 8-128 characters.", file=sys.stderr)
        return 1
    try:
        validate_password_strength(args.password)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    store = UserStore(args.data_file or settings.USER_DATA_FILE)
    store.init()
    if store.load_failed:
        print(
            f"Could not read existing users from {store.data_file}; refusing to overwrite it.",
            file=sys.stderr,
        )
        return 1
    user = UserRecord(
        name=args.name or username,
        email=args.email,
        age=args.age,
        username=username,
        password=hash_password(args.password, settings.BCRYPT_ROUNDS),
        role=Role(args.role),
    )
    try:
        saved = store.save(user)
    except DuplicateIdentifierError:
        print(f"User '{username}' already exists.", file=sys.stderr)
        return 1
    print(f"Created user '{username}' (id={saved.id}) with role '{saved.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
