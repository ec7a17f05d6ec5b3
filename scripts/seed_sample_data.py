#!/usr/bin/env python3
"""Load sample sites, services, assets and configuration items.

Existing rows (matched by name) are left untouched, so the script can be
run repeatedly against the same database.

Usage:
    python scripts/seed_sample_data.py [--dry-run]

Options:
    --dry-run   Show what would be created without writing anything
"""

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.database import async_session_maker
from src.models.asset import Asset, ConfigItem, Criticality
from src.models.service import BusinessImpact, ITService
from src.models.site import OfficeSite, SiteTier, SiteType

SITES = [
    ("Kaleidoscope", "London", "United Kingdom", SiteTier.TIER_1, 425),
    ("London Soho Works 180 Strand", "London", "United Kingdom", SiteTier.TIER_1, 320),
    ("New York Tech Hub", "New York", "United States", SiteTier.TIER_1, 380),
    ("Dublin The Sorting Office (TSO)", "Dublin", "Ireland", SiteTier.TIER_1, 210),
    ("Berlin Stralauer Allee 2", "Berlin", "Germany", SiteTier.TIER_1, 230),
    ("Amsterdam Singel 542", "Amsterdam", "Netherlands", SiteTier.TIER_2, 190),
    ("Johannesburg Wework-The Link", "Johannesburg", "South Africa", SiteTier.TIER_3, 140),
    ("Lagos Africa Works", "Lagos", "Nigeria", SiteTier.TIER_3, 95),
    ("Astana", "Astana", "Kazakhstan", SiteTier.TIER_3, 80),
]

SERVICES = [
    ("Core Network Infrastructure", "Essential networking services for all operations",
     "Infrastructure", BusinessImpact.CRITICAL, "Network Team"),
    ("Internet Connectivity", "External connectivity services",
     "Infrastructure", BusinessImpact.CRITICAL, "Network Team"),
    ("Network Services", "Core network services (DHCP, DNS, etc.)",
     "Infrastructure", BusinessImpact.CRITICAL, "Infrastructure Team"),
    ("Meeting Room Systems", "All meeting room equipment and services",
     "End User", BusinessImpact.HIGH, "IT Support"),
    ("End User Computing", "Employee computing devices and mobile services",
     "End User", BusinessImpact.HIGH, "IT Support"),
    ("Facility Infrastructure", "Physical facility IT infrastructure",
     "Facilities", BusinessImpact.HIGH, "Facilities"),
]

# name, description, type, criticality, owner, vendor, service
ASSETS = [
    ("Core Switches", "Core network infrastructure switches", "Network",
     Criticality.HIGH, "Network Team", "Cisco", "Core Network Infrastructure"),
    ("Distribution Switches", "Network distribution layer switches", "Network",
     Criticality.HIGH, "Network Team", "Cisco", "Core Network Infrastructure"),
    ("WiFi: Access Controllers (MDF)", "Wireless network controllers in MDF", "Network",
     Criticality.HIGH, "Network Team", "Aruba", "Core Network Infrastructure"),
    ("Internet Circuit", "Primary Internet connectivity circuit", "Network",
     Criticality.HIGH, "Network Team", "Various ISPs", "Internet Connectivity"),
    ("Internet Gateway (SD WAN) Velo", "Primary SD-WAN internet gateway", "Network",
     Criticality.HIGH, "Network Team", "VeloCloud", "Internet Connectivity"),
    ("DHCP server", "Dynamic Host Configuration Protocol server", "Server",
     Criticality.HIGH, "Infrastructure Team", "Microsoft", "Network Services"),
    ("Firewalls", "Network security firewalls", "Security",
     Criticality.HIGH, "Security Team", "Palo Alto", "Network Services"),
    ("Meeting room iPads", "iPads used for meeting room booking and control", "End User",
     Criticality.MEDIUM, "IT Support", "Apple", "Meeting Room Systems"),
    ("Laptops", "Employee laptops", "End User",
     Criticality.MEDIUM, "IT Support", "Apple", "End User Computing"),
    ("UPS", "Uninterruptible power supplies for server rooms", "Facilities",
     Criticality.HIGH, "Facilities", "APC", "Facility Infrastructure"),
]

# asset name -> (model, manufacturer, eol, eow, rma, in use, in stock)
CONFIG_ITEMS = {
    "Core Switches": ("Cisco Catalyst 9500", "Cisco", date(2026, 12, 31), date(2025, 6, 30),
                      "Yes", 24, 4),
    "Distribution Switches": ("Cisco Catalyst 9300", "Cisco", date(2025, 3, 31),
                              date(2024, 9, 30), "Yes", 48, 6),
    "WiFi: Access Controllers (MDF)": ("Aruba 9800 Controller", "Aruba", date(2027, 9, 30),
                                       date(2026, 3, 31), "Yes", 8, 2),
    "Internet Gateway (SD WAN) Velo": ("VeloCloud Edge 640", "VMware", date(2026, 5, 15),
                                       date(2025, 5, 15), "Yes", 6, 2),
    "Firewalls": ("Palo Alto PA-5250", "Palo Alto", date(2028, 12, 31), date(2027, 12, 31),
                  "Yes", 4, 1),
}


async def seed_sites(db: AsyncSession, dry_run: bool) -> OfficeSite | None:
    """Create missing sites; returns the site that receives sample assets."""
    created = 0
    for name, city, country, tier, employees in SITES:
        result = await db.execute(select(OfficeSite).where(OfficeSite.name == name))
        if result.scalar_one_or_none():
            continue
        created += 1
        if not dry_run:
            db.add(
                OfficeSite(
                    name=name,
                    city=city,
                    country=country,
                    type=SiteType.OFFICE,
                    tier=tier,
                    employee_count=employees,
                )
            )
    print(f"Sites: {created} to create")
    if not dry_run:
        await db.commit()

    result = await db.execute(select(OfficeSite).where(OfficeSite.name == SITES[0][0]))
    return result.scalar_one_or_none()


async def seed_services(db: AsyncSession, dry_run: bool) -> dict[str, int]:
    created = 0
    for name, description, category, impact, responsible in SERVICES:
        result = await db.execute(select(ITService).where(ITService.name == name))
        if result.scalar_one_or_none():
            continue
        created += 1
        if not dry_run:
            db.add(
                ITService(
                    name=name,
                    description=description,
                    category=category,
                    business_impact=impact,
                    responsible=responsible,
                )
            )
    print(f"Services: {created} to create")
    if not dry_run:
        await db.commit()

    result = await db.execute(select(ITService.name, ITService.id))
    return dict(result.all())


async def seed_assets(
    db: AsyncSession,
    site: OfficeSite,
    service_ids: dict[str, int],
    dry_run: bool,
) -> None:
    result = await db.execute(select(Asset.name).where(Asset.site_id == site.id))
    existing = set(result.scalars().all())

    new_assets = []
    for name, description, asset_type, criticality, owner, vendor, service in ASSETS:
        if name in existing:
            continue
        new_assets.append(
            Asset(
                name=name,
                description=description,
                site_id=site.id,
                service_id=service_ids.get(service),
                type=asset_type,
                criticality=criticality,
                owner=owner,
                vendor=vendor,
            )
        )
    print(f"Assets at {site.name}: {len(new_assets)} to create")
    if dry_run or not new_assets:
        return

    db.add_all(new_assets)
    await db.flush()

    for asset in new_assets:
        details = CONFIG_ITEMS.get(asset.name)
        if details is None:
            continue
        model, manufacturer, eol, eow, rma, in_use, in_stock = details
        db.add(
            ConfigItem(
                asset_id=asset.id,
                name=model,
                manufacturer=manufacturer,
                eol_date=eol,
                eow_date=eow,
                rma=rma,
                in_use=in_use,
                in_stock=in_stock,
            )
        )
    await db.commit()


async def main(dry_run: bool) -> None:
    if dry_run:
        print("DRY RUN - nothing will be written\n")

    async with async_session_maker() as db:
        site = await seed_sites(db, dry_run)
        service_ids = await seed_services(db, dry_run)
        if site is None:
            print("Sample site not created yet (dry run); skipping assets")
            return
        await seed_assets(db, site, service_ids, dry_run)

    print("\nDone")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed sample DR data")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be created")
    args = parser.parse_args()
    asyncio.run(main(args.dry_run))
