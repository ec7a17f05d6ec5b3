"""CRUD operations module."""

from src.db.crud.assessments import (
    AssessmentError,
    batch_score,
    calculator_for,
    complete_assessment,
    create_assessment,
    delete_assessment,
    get_assessment,
    get_completed_assessments,
    list_assessments,
    save_entries,
    update_formula,
)
from src.db.crud.assets import (
    AssetInUseError,
    create_asset,
    create_config_item,
    delete_asset,
    delete_config_item,
    get_asset,
    get_scope_assets,
    list_assets,
    list_config_items,
    update_asset,
)
from src.db.crud.registers import (
    create_issue,
    create_risk,
    delete_issue,
    delete_risk,
    get_issue,
    get_risk,
    list_issues,
    list_risks,
    update_issue,
    update_risk,
)
from src.db.crud.services import (
    create_service,
    delete_service,
    get_service,
    get_service_assets,
    get_service_by_name,
    list_services,
    update_service,
)
from src.db.crud.sites import (
    create_site,
    delete_site,
    get_site,
    get_site_by_name,
    list_sites,
    update_site,
)
from src.db.crud.users import get_user, get_user_by_lark_id, upsert_lark_user

__all__ = [
    "AssessmentError",
    "AssetInUseError",
    "batch_score",
    "calculator_for",
    "complete_assessment",
    "create_asset",
    "create_assessment",
    "create_config_item",
    "create_issue",
    "create_risk",
    "create_service",
    "create_site",
    "delete_asset",
    "delete_assessment",
    "delete_config_item",
    "delete_issue",
    "delete_risk",
    "delete_service",
    "delete_site",
    "get_asset",
    "get_assessment",
    "get_completed_assessments",
    "get_issue",
    "get_risk",
    "get_scope_assets",
    "get_service",
    "get_service_assets",
    "get_service_by_name",
    "get_site",
    "get_site_by_name",
    "get_user",
    "get_user_by_lark_id",
    "list_assessments",
    "list_assets",
    "list_config_items",
    "list_issues",
    "list_risks",
    "list_services",
    "list_sites",
    "save_entries",
    "update_asset",
    "update_formula",
    "update_issue",
    "update_risk",
    "update_service",
    "update_site",
    "upsert_lark_user",
]
