"""
Step definitions for DNS Reconciler scenarios.
"""

from behave import given, then, when

from dns_reconciler.core.dns_manager import DNSManager
from dns_reconciler.core.records import RecordTarget, record_from_dict, record_to_dict

# Table "value" column -> payload field, for types with a single target field
VALUE_FIELDS = {"A": "address", "AAAA": "address", "CNAME": "cname", "NS": "nameserver", "ALIAS": "aliasName"}


def _records_from_table(table):
    records = []
    for row in table:
        record_type = row["type"].upper()
        raw = {"type": record_type, "name": row["name"]}
        if row["ttl"]:
            raw["ttl"] = int(row["ttl"])
        if record_type == "MX":
            preference, exchange = row["value"].split(None, 1)
            raw.update(preference=int(preference), exchange=exchange)
        else:
            raw[VALUE_FIELDS.get(record_type, "value")] = row["value"]
        records.append(record_from_dict(raw))
    return records


def _provider(context):
    return context.dns_manager.dns_client.provider


@given("the DNS Reconciler is configured with the mock registrar")
def step_impl(context):
    """Configure the DNS Reconciler with the mock provider."""
    context.dns_manager = DNSManager(context.test_config)
    assert context.dns_manager is not None
    assert context.dns_manager.dns_client is not None


@given("the registrar has the following records")
def step_impl(context):
    """Replace the zone contents served by the mock registrar."""
    provider = _provider(context)
    provider.records[context.test_domain] = [record_to_dict(r) for r in _records_from_table(context.table)]
    context.dns_manager.dns_client.cache.clear()
    provider.calls.clear()


@given("I expect the following records")
def step_impl(context):
    context.expected_records = _records_from_table(context.table)


@given("I want to save the following records")
def step_impl(context):
    context.records_to_save = _records_from_table(context.table)


@when("I check alignment")
def step_impl(context):
    context.report = context.run(
        context.dns_manager.check_alignment(context.test_domain, context.expected_records)
    )


@when('I check alignment for types "{types}"')
def step_impl(context, types):
    context.report = context.run(
        context.dns_manager.check_alignment(
            context.test_domain, context.expected_records, False, types.split(",")
        )
    )


@when('I check alignment including TTL for types "{types}"')
def step_impl(context, types):
    context.report = context.run(
        context.dns_manager.check_alignment(
            context.test_domain, context.expected_records, True, types.split(",")
        )
    )


@when('I plan a cutover to A "{address}" and CNAME "{cname}"')
def step_impl(context, address, cname):
    context.plan = context.run(
        context.dns_manager.plan_cutover(context.test_domain, address, None, cname)
    )


@when("I save the records")
def step_impl(context):
    context.run(context.dns_manager.save_records(context.test_domain, context.records_to_save))


@when('I delete the "{name}" "{record_type}" records')
def step_impl(context, name, record_type):
    context.deleted = context.run(
        context.dns_manager.delete_records(context.test_domain, [RecordTarget(name=name, type=record_type)])
    )


@then("{count:d} records are missing")
def step_impl(context, count):
    assert context.report["missingCount"] == count, context.report["missing"]


@then("{count:d} records are unexpected")
def step_impl(context, count):
    assert context.report["unexpectedCount"] == count, context.report["unexpected"]


@then('the unexpected records include a "{record_type}" record')
def step_impl(context, record_type):
    assert record_type in context.report["unexpectedByType"], context.report["unexpectedByType"]


@then("the plan upserts {count:d} records")
def step_impl(context, count):
    assert len(context.plan["upserts"]) == count, context.plan["upserts"]


@then("the plan deletes {count:d} records")
def step_impl(context, count):
    assert len(context.plan["deletes"]) == count, context.plan["deletes"]


@then("the current records look third-party managed")
def step_impl(context):
    assert context.plan["likelyThirdPartyManaged"]


@then("the registrar was not modified")
def step_impl(context):
    assert _provider(context).mutation_calls() == []


@then('the registrar calls were "{calls}"')
def step_impl(context, calls):
    actual = [call[0] for call in _provider(context).calls]
    assert actual == calls.split(","), actual


@then('the registrar serves CNAME "{name}" pointing at "{target}"')
def step_impl(context, name, target):
    records = context.run(context.dns_manager.dns_client.fetch_all_records(context.test_domain))
    cnames = [r.cname for r in records if r.type == "CNAME" and r.name == name]
    assert cnames == [target], cnames
