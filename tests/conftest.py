"""Shared test fixtures."""

import hashlib
import zipfile

import pytest

from integration_diff.domain.models import ArchiveFileRecord


# ── Sample XML Content ───────────────────────────────────────────────────

PROJECT_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<icsproject>
  <projectName>Order Sync</projectName>
  <projectCode>ORDER_SYNC</projectCode>
  <projectVersion>01.00.0000</projectVersion>
  <icsflow>
    <application name="application_1">
      <role>source</role>
      <adapter><name>Orders REST</name><type>rest</type><code>REST</code></adapter>
    </application>
    <application name="application_2">
      <role>target</role>
      <adapter><name>Orders DB</name><type>database</type><code>atpdatabase</code></adapter>
    </application>
    <processor name="processor_10"><type>transformer</type><role>map</role></processor>
    <orchestration>
      <globalTry id="gt">
        <receive id="r1" refUri="application_1/receive"/>
        <transformer id="t1" name="MapOrder" refUri="processor_10/map"/>
        <switch id="s1" name="RouteOrder">
          <case id="c1" name="IsPriority">
            <invoke id="i1" refUri="application_2/insert" outputVariable="resp">
              <operation name="InsertOrder"/>
            </invoke>
          </case>
          <otherwise id="o1" name="Default">
            <assign id="a1" name="SetStatus"/>
          </otherwise>
        </switch>
        <stop id="st1" name="Done"/>
        <catchAll id="ca1" name="GlobalFault"/>
      </globalTry>
    </orchestration>
  </icsflow>
</icsproject>
"""

PROCESS_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<bpel:process name="OrderProcess" targetNamespace="http://example.com/order"
    xmlns:bpel="http://docs.oasis-open.org/wsbpel/2.0/process/executable">
  <bpel:sequence name="main">
    <bpel:receive name="ReceiveOrder" partnerLink="client" operation="process" createInstance="yes"/>
    <bpel:assign name="PrepareRequest">
      <bpel:copy/>
      <bpel:copy/>
    </bpel:assign>
    <bpel:if name="CheckAmount">
      <bpel:condition>$amount &gt; 1000</bpel:condition>
      <bpel:invoke name="RequestApproval" partnerLink="approver" operation="approve"/>
      <bpel:else>
        <bpel:empty name="AutoApprove"/>
      </bpel:else>
    </bpel:if>
    <bpel:reply name="ReplyOrder" partnerLink="client" operation="process"/>
  </bpel:sequence>
</bpel:process>
"""

MAPPING_XSL = """\
<?xml version="1.0" encoding="UTF-8"?>
<xsl:stylesheet version="2.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform" timestamp="2024-01-01T10:00:00">
  <xsl:template match="/">
    <order><id><xsl:value-of select="/in/id"/></id></order>
  </xsl:template>
</xsl:stylesheet>
"""

CONNECTION_JCA = """\
<adapter-config name="Insert_ORDERS" adapter="atpdatabase" wsdlLocation="orders.wsdl">
  <connection-factory location="eis/DB/OrdersDS"/>
  <endpoint-interaction operation="insert">
    <interaction-spec className="oracle.DBStoredProcedureInteractionSpec">
      <property name="ProcedureName" value="INSERT_ORDER"/>
    </interaction-spec>
  </endpoint-interaction>
</adapter-config>
"""


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode('utf-8')).hexdigest()


def make_record(path: str, content: str | None, digest: str | None = None) -> ArchiveFileRecord:
    """Build a file record; the hash defaults to the content digest."""
    if digest is None:
        digest = content_hash(content or '')
    return ArchiveFileRecord(path=path, hash=digest, size=len(content or ''), content=content)


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def make_zip(tmp_path):
    """Write a dict of ``{path: content}`` to a ZIP file and return its path."""
    def _write(files: dict[str, str], filename: str = "archive.zip") -> str:
        zip_path = tmp_path / filename
        with zipfile.ZipFile(zip_path, 'w') as zf:
            for path, content in files.items():
                zf.writestr(path, content)
        return str(zip_path)
    return _write


@pytest.fixture
def archive_pair(make_zip):
    """Two versions of a small integration export."""
    left = make_zip({
        "icspackage/project/PROJECT-INF/project.xml": PROJECT_XML,
        "icspackage/project/processor_11/resourcegroup_3/mapping.xsl": MAPPING_XSL,
        "icspackage/project/application_1/connection.jca": CONNECTION_JCA,
        "icspackage/project/schedule.properties": "cron=0 0 * * *\n",
    }, "left.zip")
    right = make_zip({
        "icspackage/project/PROJECT-INF/project.xml": PROJECT_XML.replace(
            '<assign id="a1" name="SetStatus"/>', '<assign id="a1" name="SetStatusV2"/>',
        ),
        "icspackage/project/processor_42/resourcegroup_7/mapping.xsl": MAPPING_XSL.replace(
            "2024-01-01T10:00:00", "2024-06-30T23:59:59",
        ),
        "icspackage/project/application_1/connection.jca": CONNECTION_JCA.replace(
            "INSERT_ORDER", "INSERT_ORDER_V2",
        ),
        "icspackage/project/lookups/countries.dvm": "<dvm name='Countries'/>",
    }, "right.zip")
    return left, right
