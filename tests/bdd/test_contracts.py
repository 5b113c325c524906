from pytest_bdd import scenarios, given, when, then, parsers
from prospectcrm.cli.main import cli

scenarios("features/contracts.feature")

_CONTENT = b"%PDF-1.4 proposition commerciale"


@given(parsers.parse('a local file "{name}"'))
def local_file(tmp_path, context, name):
    path = tmp_path / name
    path.write_bytes(_CONTENT)
    context["file"] = str(path)
    context["download"] = tmp_path / f"downloaded-{name}"


@given(parsers.parse('organization "{org_id}" has been deleted'))
def org_deleted(crm, org_id):
    crm.delete_organization(org_id)


@when("the user lists contracts")
def list_contracts(runner, crm, context):
    context["result"] = runner.invoke(cli, ["contracts", "list"], obj=crm)


@when(parsers.parse('the user lists contracts assigned to "{name}"'))
def list_by_assignee(runner, crm, context, name):
    context["result"] = runner.invoke(cli, ["contracts", "list", "--assignee", name], obj=crm)


@when(parsers.parse('the user attaches the file to contract "{contract_id}"'))
def attach(runner, crm, context, contract_id):
    context["result"] = runner.invoke(cli, ["contracts", "attach", contract_id, context["file"]], obj=crm)
    assert context["result"].exit_code == 0, context["result"].output


@when(parsers.parse('the user downloads document {index:d} of contract "{contract_id}"'))
def download(runner, crm, context, index, contract_id, tmp_path):
    target = context.get("download", tmp_path / "download.bin")
    context["result"] = runner.invoke(
        cli, ["contracts", "download", contract_id, "--index", str(index), "-o", str(target)], obj=crm
    )


@then("the downloaded file matches the original")
def downloaded_matches(context):
    assert context["download"].read_bytes() == _CONTENT
