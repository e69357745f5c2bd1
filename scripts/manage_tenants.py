import argparse
import json

from marketplace import models
from marketplace.db import SessionLocal
from marketplace.domain.tenancy.settings import load_tenant_settings
from marketplace.errors import DomainError
from marketplace.services import tenant_admin


def _print_tenant(tenant: models.Tenant) -> None:
    deleted = f" deleted_at={tenant.deleted_at.isoformat()}" if tenant.deleted_at else ""
    print(f"{tenant.id} | {tenant.slug} | {tenant.name} | {tenant.status.value}{deleted}")


def _parse_settings(pairs: list[str]) -> dict:
    """key=value pairs; values are parsed as JSON when possible, ``key=`` removes the key."""
    updates: dict = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise SystemExit(f"Invalid setting '{pair}', expected key=value")
        if raw == "":
            updates[key.strip()] = None
            continue
        try:
            updates[key.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            updates[key.strip()] = raw
    return updates


def run(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        if args.command == "list":
            status = models.TenantStatus(args.status) if args.status else None
            for tenant in tenant_admin.list_tenants(db, status=status, include_deleted=args.include_deleted):
                _print_tenant(tenant)
        elif args.command == "activate":
            changed = tenant_admin.bulk_update_status(
                db, args.tenant_ids, models.TenantStatus.active, reason=args.reason, actor=args.actor
            )
            print(f"activated={changed} requested={len(args.tenant_ids)}")
        elif args.command == "deactivate":
            changed = tenant_admin.bulk_update_status(
                db, args.tenant_ids, models.TenantStatus.inactive, reason=args.reason, actor=args.actor
            )
            print(f"deactivated={changed} requested={len(args.tenant_ids)}")
        elif args.command == "delete":
            tenant_admin.delete_tenant(db, args.tenant_id, reason=args.reason, actor=args.actor)
            print(f"deleted={args.tenant_id}")
        elif args.command == "settings":
            if args.set:
                tenant = tenant_admin.update_tenant_settings(
                    db, args.tenant_id, _parse_settings(args.set), actor=args.actor
                )
            else:
                tenant = tenant_admin.get_tenant(db, args.tenant_id)
            print(json.dumps(load_tenant_settings(tenant.settings_json), indent=2, sort_keys=True))
        elif args.command == "audit":
            for entry in tenant_admin.list_audit_log(db, args.tenant_id):
                print(
                    f"{entry.created_at} | {entry.action.value} | actor={entry.actor or '-'} "
                    f"| reason={entry.reason or '-'} | {entry.payload_json or ''}"
                )
    except DomainError as exc:
        print(f"Error: {exc.message}")
        return 1
    finally:
        db.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage tenant status, settings and audit history.")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List tenants.")
    list_cmd.add_argument("--status", choices=[status.value for status in models.TenantStatus])
    list_cmd.add_argument("--include-deleted", action="store_true")

    for name in ("activate", "deactivate"):
        cmd = sub.add_parser(name, help=f"{name.capitalize()} one or more tenants.")
        cmd.add_argument("tenant_ids", nargs="+")
        cmd.add_argument("--reason")
        cmd.add_argument("--actor")

    delete_cmd = sub.add_parser("delete", help="Soft delete a tenant.")
    delete_cmd.add_argument("tenant_id")
    delete_cmd.add_argument("--reason")
    delete_cmd.add_argument("--actor")

    settings_cmd = sub.add_parser("settings", help="Show or update tenant settings.")
    settings_cmd.add_argument("tenant_id")
    settings_cmd.add_argument("--set", action="append", metavar="KEY=VALUE")
    settings_cmd.add_argument("--actor")

    audit_cmd = sub.add_parser("audit", help="Show a tenant's audit history.")
    audit_cmd.add_argument("tenant_id")
    return parser


def main() -> None:
    raise SystemExit(run(build_parser().parse_args()))


if __name__ == "__main__":
    main()
