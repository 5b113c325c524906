from pytest_bdd import scenarios, given, when, then, parsers
from prospectcrm.cli.main import cli

scenarios("features/organizations.feature")

_SPREADSHEET = (
    "Nom,Ville,Chambres\n"
    "Hotel Azur,Flic en Flac,80\n"
    ",Curepipe,\n"
    "Pharmacie Centrale,Curepipe,\n"
)


@given("a spreadsheet with 2 named organizations and a row without a name")
def spreadsheet(tmp_path, context):
    path = tmp_path / "prospects.csv"
    path.write_text(_SPREADSHEET, encoding="utf-8")
    context["file"] = str(path)


@when("the user lists organizations")
def list_orgs(runner, crm, context):
    context["result"] = runner.invoke(cli, ["orgs", "list"], obj=crm)


@when("the user imports the spreadsheet")
def import_spreadsheet(runner, crm, context):
    context["result"] = runner.invoke(cli, ["orgs", "import", context["file"]], obj=crm)


@when(parsers.parse('the user sets the status of organization "{org_id}" to "{status}"'))
def edit_status(runner, crm, context, org_id, status):
    context["result"] = runner.invoke(cli, ["orgs", "edit", org_id, "--status", status], obj=crm)


@when(parsers.parse('the user deletes organization "{org_id}"'))
def delete_org(runner, crm, context, org_id):
    context["result"] = runner.invoke(cli, ["orgs", "delete", org_id, "--yes"], obj=crm)


@when("the user opens the dashboard")
def open_dashboard(runner, crm, context):
    context["result"] = runner.invoke(cli, ["dashboard"], obj=crm)


@then(parsers.parse("there are {count:d} organizations"))
def organization_count(crm, count):
    assert len(crm.list_organizations()) == count


@then(parsers.parse('organization "{org_id}" still has {count:d} contact'))
def contact_count(crm, org_id, count):
    assert len(crm.contacts_by_organization(org_id)) == count
