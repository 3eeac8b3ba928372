from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from campaign_builder.campaign_api import CampaignApiClient  # noqa: E402
from campaign_builder.enums import WizardStageEnum  # noqa: E402
from campaign_builder.services.messaging import select_client_profile  # noqa: E402
from campaign_builder.services.resources import ResourceLoader  # noqa: E402
from campaign_builder.services.review import build_review_summary  # noqa: E402
from campaign_builder.services.submission import SubmissionGateway  # noqa: E402
from campaign_builder.services.wizard import CampaignWizard, definition_from_document  # noqa: E402


async def main(definition_path: Path, import_profile: str | None, dry_run: bool) -> int:
    try:
        definition = definition_from_document(json.loads(definition_path.read_text()))
    except ValueError as exc:
        print(f"Invalid campaign definition {definition_path}: {exc}")
        return 1
    wizard = CampaignWizard(definition)
    client = CampaignApiClient()

    if import_profile is not None:
        loader = ResourceLoader(client)
        result = await loader.load_client_profiles()
        if result.notice:
            print(result.notice)
        profile = select_client_profile(result.items, import_profile or None)
        if profile is None:
            print("No matching client profile; keeping value propositions and trust signals from the file.")
        else:
            wizard.messaging.import_value_propositions(profile)
            wizard.messaging.import_trust_signals(profile)
            print(f"Imported messaging assets from client profile {profile.id}")

    while wizard.current_stage != WizardStageEnum.review:
        if not wizard.next():
            print(f"Stage '{wizard.current_stage.value}' is incomplete; fix the definition and retry.")
            return 1

    summary = build_review_summary(wizard.definition)
    print(json.dumps(summary.model_dump(mode="json"), indent=2))
    if dry_run:
        print(json.dumps(wizard.build_request().to_payload(), indent=2))
        return 0

    outcome = await SubmissionGateway(client).submit(wizard)
    if not outcome.ok:
        print(f"Submission failed: {outcome.error}")
        return 1
    print(f"Created campaign {outcome.campaign_id} ({outcome.status.value}). {outcome.notice}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Validate a campaign definition file and create it as a draft.")
    parser.add_argument("definition", type=Path, help="Path to a campaign definition JSON file.")
    parser.add_argument(
        "--import-profile",
        nargs="?",
        const="",
        default=None,
        help="Import value propositions and trust signals from a client profile (first profile if no id given).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the request payload instead of submitting.")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.definition, args.import_profile, args.dry_run)))
