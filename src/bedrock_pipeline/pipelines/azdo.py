"""Azure DevOps URL helpers."""

AZDO_BASE_URL = "https://dev.azure.com"


def azdo_url(org_name: str) -> str:
    """Return the organization URL for an Azure DevOps organization name."""
    return f"{AZDO_BASE_URL}/{org_name}"


def build_results_url(org_name: str, project: str, build_id: int) -> str:
    """Return the web URL showing the results of a build."""
    return f"{azdo_url(org_name)}/{project}/_build/results?buildId={build_id}&view=results"
