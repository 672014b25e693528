"""
KIIT Rentals command-line client

Usage:
    kiit-rentals signup --name "A" --email a@x.com
    kiit-rentals login --email a@x.com
    kiit-rentals list --type rent --search cycle
    kiit-rentals create --name Book --price 100 --image ./book.jpg --phone 9876543210
    kiit-rentals update <id> --price 150
    kiit-rentals delete <id>
    kiit-rentals logout

The session (token and profile) is stored in ~/.kiit_rentals/session.json,
or the path in KIIT_RENTALS_SESSION.
"""

import argparse
import getpass
import json
import sys

from .client.api import DEFAULT_BASE_URL, ApiError, RentalsClient
from .client.images import DataUrlImageNormalizer, ImageError
from .client.session import DEFAULT_SESSION_PATH, SessionStore
from .models.product import Category, ListingType

PRODUCT_FIELDS = ("name", "price", "image", "type", "category", "phone", "address", "deadline", "expiry")


def _print_json(value):
    print(json.dumps(value, indent=2))


def _password(args):
    return args.password if args.password is not None else getpass.getpass("Password: ")


def _product_fields(args, normalizer):
    fields = {}
    for name in PRODUCT_FIELDS:
        value = getattr(args, name, None)
        if value is not None:
            fields[name] = value
    if "image" in fields:
        fields["image"] = normalizer.normalize(fields["image"])
    return fields


def cmd_signup(client, args):
    _print_json(client.signup(args.name, args.email, _password(args)))


def cmd_login(client, args):
    _print_json(client.login(args.email, _password(args)))


def cmd_logout(client, args):
    client.logout()
    print("Logged out.")


def cmd_whoami(client, args):
    if not client.session.is_authenticated:
        print("Not logged in.")
        return
    _print_json(client.me())


def cmd_list(client, args):
    _print_json(client.list_products(search=args.search, listing_type=args.type, category=args.category))


def cmd_mine(client, args):
    _print_json(client.my_products())


def cmd_show(client, args):
    _print_json(client.get_product(args.id))


def cmd_create(client, args):
    _print_json(client.create_product(_product_fields(args, DataUrlImageNormalizer())))


def cmd_update(client, args):
    _print_json(client.update_product(args.id, _product_fields(args, DataUrlImageNormalizer())))


def cmd_delete(client, args):
    client.delete_product(args.id)
    print("Product deleted successfully")


def _add_product_arguments(parser, required):
    parser.add_argument("--name", required=required)
    parser.add_argument("--price", type=float, required=required)
    parser.add_argument("--image", required=required, help="http(s) URL, data URL or local image file")
    parser.add_argument("--type", choices=[t.value for t in ListingType])
    parser.add_argument("--category", choices=[c.value for c in Category])
    parser.add_argument("--phone", required=required)
    parser.add_argument("--address")
    parser.add_argument("--deadline", help="YYYY-MM-DD")
    parser.add_argument("--expiry", help="YYYY-MM-DD (required for snacks)")


def build_parser():
    parser = argparse.ArgumentParser(prog="kiit-rentals", description="KIIT Rentals marketplace client")
    parser.add_argument("--api-url", default=DEFAULT_BASE_URL, help=f"API base URL (default: {DEFAULT_BASE_URL})")
    parser.add_argument("--session-file", default=str(DEFAULT_SESSION_PATH), help="Where the login session is kept")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("signup", help="Create an account and log in")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", help="Prompted for when omitted")
    p.set_defaults(func=cmd_signup)

    p = sub.add_parser("login", help="Log in")
    p.add_argument("--email", required=True)
    p.add_argument("--password", help="Prompted for when omitted")
    p.set_defaults(func=cmd_login)

    sub.add_parser("logout", help="Forget the stored session").set_defaults(func=cmd_logout)
    sub.add_parser("whoami", help="Show the logged-in user").set_defaults(func=cmd_whoami)

    p = sub.add_parser("list", help="Browse listings")
    p.add_argument("--search")
    p.add_argument("--type", choices=[t.value for t in ListingType])
    p.add_argument("--category", choices=[c.value for c in Category])
    p.set_defaults(func=cmd_list)

    sub.add_parser("mine", help="Listings you created").set_defaults(func=cmd_mine)

    p = sub.add_parser("show", help="Show one listing")
    p.add_argument("id")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("create", help="Create a listing")
    _add_product_arguments(p, required=True)
    p.set_defaults(func=cmd_create)

    p = sub.add_parser("update", help="Change fields of a listing")
    p.add_argument("id")
    _add_product_arguments(p, required=False)
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("delete", help="Delete a listing")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    session = SessionStore(args.session_file).load()
    client = RentalsClient(session, base_url=args.api_url)
    try:
        args.func(client, args)
    except (ApiError, ImageError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
