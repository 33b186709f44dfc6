#!/usr/bin/env python3
"""
Demo Seed Script

Posts the two demo projects as their authors, using whatever storage
mode is configured (COLLABHUB_STORAGE_MODE). Skips if projects exist.

Run: python scripts/seed_demo.py
"""
import sys
sys.path.insert(0, '.')

from collabhub.core.config import get_settings
from collabhub.core.logging import configure_logging
from collabhub.schemas.schemas import CreateProjectInput
from collabhub.services.container import get_services, reset_services


DEMO_PROJECTS = [
    ("carol@mit.edu", CreateProjectInput(
        title="Quantum Error Correction Research",
        description="Seeking passionate undergraduate/graduate students to join our quantum computing "
                    "research lab. Focus on developing new error correction codes for NISQ devices.",
        requirements=["Research Assistant", "PhD Student"],
        budget="Stipend",
        duration="1 year",
        tags=["Quantum Computing", "Physics", "Mathematics", "Research"],
        location="Cambridge, MA",
        is_remote=False,
    )),
    ("bob@biotech.com", CreateProjectInput(
        title="AI-Powered Drug Discovery Platform",
        description="Looking for ML engineers to help build a platform that uses transformer models "
                    "to predict drug-protein interactions.",
        requirements=["ML Engineer", "Research Intern", "Data Scientist"],
        budget="Equity",
        duration="6 months",
        tags=["AI", "Machine Learning", "Biotech", "Drug Discovery"],
        is_remote=True,
    )),
]


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    services = get_services()

    print("=" * 50)
    print(f"COLLABHUB - DEMO SEED ({settings.storage_mode.value})")
    print("=" * 50)

    services.projects.refresh()
    if services.projects.list():
        print(f"\n⚠️  {len(services.projects.list())} project(s) already present, nothing to do")
        return

    for email, data in DEMO_PROJECTS:
        session = services.identity.new_session()
        services.identity.login(session, email, settings.placeholder_password)
        project = services.projects.create(data, session)
        services.identity.logout(session)
        print(f"    ✅ {project.title} (by {project.author.name}) -> {project.id}")

    print("\nSeed complete!")


if __name__ == "__main__":
    try:
        main()
    finally:
        reset_services()
