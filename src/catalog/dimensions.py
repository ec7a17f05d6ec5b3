"""Disaster-recovery dimensions and their assessment parameters."""

import enum
from dataclasses import dataclass, field

YES_NO_NA = ("Yes", "No", "Not Applicable")
COVERAGE = ("Yes", "Available for some CIs", "No", "Not Applicable")
STANDBY = ("Active", "Hot Standby", "Cold Standby", "No", "Not Applicable")


class ParameterType(str, enum.Enum):
    """How a parameter is answered in the assessment form."""

    TEXT = "text"
    DROPDOWN = "dropdown"
    PERCENTAGE = "percentage"
    NUMBER = "number"
    HYPERLINK = "hyperlink"
    COUNTER = "counter"


@dataclass(frozen=True)
class Parameter:
    id: int
    name: str
    description: str
    type: ParameterType
    scorable: bool
    weightage: float | None = None  # percent of the dimension, scorable only
    options: tuple[str, ...] = ()
    unit: str | None = None


@dataclass(frozen=True)
class Dimension:
    id: int
    name: str
    description: str
    scorable: bool
    parameters: tuple[Parameter, ...] = field(default_factory=tuple)

    @property
    def scorable_parameters(self) -> tuple[Parameter, ...]:
        return tuple(p for p in self.parameters if p.scorable)


T = ParameterType

DIMENSIONS: tuple[Dimension, ...] = (
    Dimension(
        id=1,
        name="Internal Support",
        description="Internal support structure and processes for disaster recovery",
        scorable=True,
        parameters=(
            Parameter(1, "Primary support POC", "Primary point of contact for support",
                      T.TEXT, True, 25),
            Parameter(2, "Secondary support - backup POC", "Backup point of contact for support",
                      T.TEXT, True, 25),
            Parameter(3, "Escalation POC", "Point of contact for escalations",
                      T.TEXT, True, 20),
            Parameter(4, "Shared Services Support during business hours",
                      "Level of support available during business hours",
                      T.DROPDOWN, True, 10,
                      options=("Remote L1 support", "Remote L2 support", "Not Available")),
            Parameter(5, "Out of hours support",
                      "Level of support available outside business hours",
                      T.DROPDOWN, True, 7.5,
                      options=("Onsite L1 Support", "Onsite L2 Support", "Remote L1 support",
                               "Remote L2 support", "Not Available")),
            Parameter(6, "OOB (Out of Band) Management available",
                      "Availability of out of band management",
                      T.DROPDOWN, True, 10, options=YES_NO_NA),
            Parameter(7, "OOO roster for key personnel available",
                      "Availability of out of office roster for key personnel",
                      T.DROPDOWN, True, 7.5, options=YES_NO_NA),
        ),
    ),
    Dimension(
        id=2,
        name="External Support",
        description="External support arrangements and vendors for disaster recovery",
        scorable=True,
        parameters=(
            Parameter(8, "3rd party Managed Services support in place",
                      "Whether third-party managed services support is in place",
                      T.DROPDOWN, True, 40, options=YES_NO_NA),
            Parameter(9, "Support duration", "Duration of the support agreement in years",
                      T.COUNTER, False),
            Parameter(10, "3rd Party Managed Services support vendor",
                      "Name of the third-party managed services vendor", T.TEXT, False),
            Parameter(11, "3rd Party Managed Service support primary contact",
                      "Primary contact for third-party managed services", T.TEXT, False),
            Parameter(12, "3rd Party support secondary contact",
                      "Secondary contact for third-party support", T.TEXT, False),
            Parameter(13, "3rd party Out of hours support available",
                      "Availability of third-party support outside business hours",
                      T.DROPDOWN, True, 20, options=YES_NO_NA),
            Parameter(14, "Is EOL Warranty tracked (per CI)?",
                      "Whether end-of-life warranty is tracked per configuration item",
                      T.DROPDOWN, True, 40, options=YES_NO_NA),
        ),
    ),
    Dimension(
        id=3,
        name="Support Metrics",
        description="Metrics and SLAs for disaster recovery support",
        scorable=True,
        parameters=(
            Parameter(15, "Asset Uptime", "Percentage of time the asset is operational",
                      T.PERCENTAGE, True, 15, unit="%"),
            Parameter(16, "RTO Recovery Time Objective",
                      "Target time for the recovery of the asset",
                      T.NUMBER, True, 15, unit="minutes"),
            Parameter(17, "RPO Recovery Point Objective",
                      "Maximum targeted period in which data might be lost",
                      T.NUMBER, True, 15, unit="minutes"),
            Parameter(18, "Response SLA - P0", "Service level agreement for P0 incidents",
                      T.PERCENTAGE, True, 15, unit="%"),
            Parameter(19, "Response SLA - P1", "Service level agreement for P1 incidents",
                      T.PERCENTAGE, True, 15, unit="%"),
            Parameter(20, "Resolution SLA - P0",
                      "Service level agreement for resolving P0 incidents",
                      T.PERCENTAGE, True, 5, unit="%"),
            Parameter(21, "Resolution SLA - P1",
                      "Service level agreement for resolving P1 incidents",
                      T.PERCENTAGE, True, 5, unit="%"),
            Parameter(22, "RMA - Return Material authorisation available",
                      "Availability of return material authorization",
                      T.DROPDOWN, True, 15, options=YES_NO_NA),
        ),
    ),
    Dimension(
        id=4,
        name="Redundancy",
        description="Redundancy arrangements for disaster recovery",
        scorable=True,
        parameters=(
            Parameter(23, "Primary device", "Status of the primary device",
                      T.DROPDOWN, False, options=STANDBY),
            Parameter(24, "Secondary backup", "Status of the secondary backup",
                      T.DROPDOWN, True, 100, options=STANDBY),
        ),
    ),
    Dimension(
        id=5,
        name="Inventory Management",
        description="Inventory management for disaster recovery",
        scorable=True,
        parameters=(
            Parameter(25, "Spares maintained onsite", "Whether spares are maintained onsite",
                      T.DROPDOWN, True, 50, options=YES_NO_NA),
            Parameter(26, "Spares Management Policy", "Link to the spares management policy",
                      T.HYPERLINK, True, 50),
        ),
    ),
    Dimension(
        id=6,
        name="Alerting",
        description="Alerting systems and processes for disaster recovery",
        scorable=True,
        parameters=(
            Parameter(27, "Alerting available for all CIs",
                      "Availability of alerting for all configuration items",
                      T.DROPDOWN, True, 100, options=COVERAGE),
            Parameter(28, "Alerting tool", "Tool used for alerting", T.TEXT, False),
        ),
    ),
    Dimension(
        id=7,
        name="Monitoring",
        description="Monitoring systems and processes for disaster recovery",
        scorable=True,
        parameters=(
            Parameter(29, "Realtime monitoring available for all CIs",
                      "Availability of real-time monitoring for all configuration items",
                      T.DROPDOWN, True, 50, options=COVERAGE),
            Parameter(30, "Realtime monitoring tool", "Tool used for real-time monitoring",
                      T.TEXT, False),
            Parameter(31, "Trend Analysis", "Availability of trend analysis",
                      T.DROPDOWN, True, 50, options=COVERAGE),
            Parameter(32, "Trend Analysis tool", "Tool used for trend analysis", T.TEXT, False),
        ),
    ),
    Dimension(
        id=8,
        name="Maintenance",
        description="Maintenance procedures and documentation for disaster recovery",
        scorable=True,
        parameters=(
            Parameter(33, "Asset covered in Network Architecture Map?",
                      "Whether the asset is covered in the network architecture map",
                      T.DROPDOWN, True, 30,
                      options=("Yes all CIs covered", "Some CIs covered", "No", "Not Applicable")),
            Parameter(34, "Network Architecture Map Link",
                      "Link to the network architecture map", T.HYPERLINK, False),
            Parameter(35, "Maintenance SOPs available?",
                      "Availability of standard operating procedures for maintenance",
                      T.DROPDOWN, True, 15, options=YES_NO_NA),
            Parameter(36, "Maintenance SOP Link",
                      "Link to the maintenance standard operating procedures", T.HYPERLINK, False),
            Parameter(37, "Hardware Maintenance Schedule",
                      "Link to the hardware maintenance schedule", T.HYPERLINK, True, 15),
            Parameter(38, "Patching SOP available?",
                      "Availability of standard operating procedures for patching",
                      T.DROPDOWN, True, 20, options=YES_NO_NA),
            Parameter(39, "Patching SOP link",
                      "Link to the patching standard operating procedures", T.HYPERLINK, False),
            Parameter(40, "Patching Schedule", "Link to the patching schedule",
                      T.HYPERLINK, True, 20),
        ),
    ),
    Dimension(
        id=9,
        name="Testing",
        description="Testing procedures and documentation for disaster recovery",
        scorable=True,
        parameters=(
            Parameter(41, "Failover testing schedule available?",
                      "Availability of a failover testing schedule",
                      T.DROPDOWN, True, 50, options=YES_NO_NA),
            Parameter(42, "Failover testing schedule", "Link to the failover testing schedule",
                      T.HYPERLINK, False),
            Parameter(43, "Failover SOP available, including scenario modeling?",
                      "Availability of standard operating procedures for failover, "
                      "including scenario modeling",
                      T.DROPDOWN, True, 50, options=YES_NO_NA),
            Parameter(44, "Failover SOP link",
                      "Link to the failover standard operating procedures", T.HYPERLINK, False),
        ),
    ),
)

del T

_DIMENSIONS_BY_ID = {d.id: d for d in DIMENSIONS}
_PARAMETERS_BY_ID = {p.id: p for d in DIMENSIONS for p in d.parameters}
_DIMENSION_BY_PARAMETER = {p.id: d for d in DIMENSIONS for p in d.parameters}


def get_dimension(dimension_id: int) -> Dimension | None:
    return _DIMENSIONS_BY_ID.get(dimension_id)


def get_parameter(parameter_id: int) -> Parameter | None:
    return _PARAMETERS_BY_ID.get(parameter_id)


def dimension_for_parameter(parameter_id: int) -> Dimension | None:
    return _DIMENSION_BY_PARAMETER.get(parameter_id)


def scorable_parameters() -> list[Parameter]:
    """All scorable parameters across dimensions, in catalog order."""
    return [p for d in DIMENSIONS for p in d.scorable_parameters]
