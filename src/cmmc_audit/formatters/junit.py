"""JUnit XML formatter for CI/CD integration.

One testsuite per control family, one testcase per check result. FAIL
results carry a <failure> element.
"""

from __future__ import annotations

from xml.dom import minidom
from xml.etree import ElementTree as ET

from ..models.result import AuditReport, ControlCheckResult


def render_junit(report: AuditReport) -> str:
    by_family: dict[str, list[ControlCheckResult]] = {}
    for result in report.results:
        by_family.setdefault(result.control_family, []).append(result)

    testsuites = ET.Element("testsuites")
    testsuites.set("name", report.title)
    testsuites.set("timestamp", report.generated_at.strftime("%Y-%m-%dT%H:%M:%S"))

    total_tests = 0
    total_failures = 0

    for family, results in by_family.items():
        testsuite = ET.SubElement(testsuites, "testsuite")
        testsuite.set("name", family)
        testsuite.set("tests", str(len(results)))
        if report.hostname:
            testsuite.set("hostname", report.hostname)

        suite_failures = 0

        for result in results:
            total_tests += 1

            testcase = ET.SubElement(testsuite, "testcase")
            testcase.set("name", f"{result.control_id}: {result.description}")
            testcase.set("classname", family)

            if not result.passed:
                total_failures += 1
                suite_failures += 1

                failure = ET.SubElement(testcase, "failure")
                failure.set("message", f"[{result.control_id}] {result.description}")
                failure.set("type", "noncompliant")
                failure.text = (
                    f"Current setting: {result.current_setting}\n"
                    f"Compliant setting: {result.compliant_setting}"
                )

        testsuite.set("failures", str(suite_failures))
        testsuite.set("errors", "0")
        testsuite.set("skipped", "0")

    testsuites.set("tests", str(total_tests))
    testsuites.set("failures", str(total_failures))
    testsuites.set("errors", "0")

    # Pretty-print XML
    rough = ET.tostring(testsuites, encoding="unicode")
    dom = minidom.parseString(rough)
    return dom.toprettyxml(indent="  ", encoding="UTF-8").decode("utf-8")
