"""
Catena-X policy vocabulary.

Static catalog of what the 2025-09 Catena-X ODRL profile allows:
- constraint left operands with their operators and right operands
- which left operands may appear per action and rule type

The catalog is read-only and shared by every request.
"""

import re
from dataclasses import dataclass, field

from cxpolicy.core.models import Action, Operator, RuleType


ODRL_NS = "http://www.w3.org/ns/odrl/2/"
EDC_NS = "https://w3id.org/edc/v0.0.1/ns/"
CX_POLICY_NS = "https://w3id.org/catenax/2025/9/policy/"
TX_NS = "https://w3id.org/tractusx/v0.0.1/ns/"

# Prefix -> namespace, as used in compacted policy documents
NAMESPACES: dict[str, str] = {
    "odrl": ODRL_NS,
    "edc": EDC_NS,
    "cx-policy": CX_POLICY_NS,
    "tx": TX_NS,
}

BPNL_PATTERN = re.compile(r"^BPNL[0-9A-Z]{12}$")
DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(Z|[+-]\d{2}:\d{2})$")
INTEGER_PATTERN = re.compile(r"^[0-9]+$")

# Operators whose right operand may be a list of values
LIST_OPERATORS = frozenset({Operator.IS_ANY_OF, Operator.IS_ALL_OF, Operator.IS_NONE_OF})


@dataclass(frozen=True)
class RightOperandDefinition:
    """One admissible right operand of a constraint."""

    name: str
    kind: str = "string"  # "string" or "integer"
    const: str | None = None
    pattern: re.Pattern | None = None

    def accepts(self, value: object) -> bool:
        """Check a single (non-list) right operand value."""
        if isinstance(value, bool):
            return False

        if self.kind == "integer":
            if isinstance(value, int):
                return value >= 0
            return isinstance(value, str) and bool(INTEGER_PATTERN.match(value.strip()))

        if not isinstance(value, str) or not value.strip():
            return False
        if self.const is not None:
            return value == self.const
        if self.pattern is not None:
            return bool(self.pattern.match(value))
        return True


@dataclass(frozen=True)
class ConstraintDefinition:
    """A known constraint left operand and what it accepts."""

    left_operand: str
    operators: tuple[Operator, ...]
    right_operands: tuple[RightOperandDefinition, ...] = field(default_factory=tuple)

    def accepts_operator(self, operator: str) -> bool:
        return any(op.value == operator for op in self.operators)

    def accepts_value(self, value: object) -> bool:
        return any(ro.accepts(value) for ro in self.right_operands)


def _const(name: str, value: str) -> RightOperandDefinition:
    return RightOperandDefinition(name=name, const=value)


# =============================================================================
# Constraint catalog
# =============================================================================

_EQ = (Operator.EQ,)

CONSTRAINTS: dict[str, ConstraintDefinition] = {
    c.left_operand: c
    for c in [
        ConstraintDefinition(
            "FrameworkAgreement",
            _EQ,
            (_const("DataExchangeGovernance", "DataExchangeGovernance:1.0"),),
        ),
        ConstraintDefinition(
            "Membership",
            _EQ,
            (_const("MembershipActive", "active"),),
        ),
        ConstraintDefinition(
            "BusinessPartnerNumber",
            (Operator.IS_ANY_OF, Operator.IS_NONE_OF),
            (RightOperandDefinition("BusinessPartnerNumber", pattern=BPNL_PATTERN),),
        ),
        ConstraintDefinition(
            "BusinessPartnerGroup",
            (Operator.IS_ANY_OF, Operator.IS_NONE_OF),
            (RightOperandDefinition("BusinessPartnerGroup"),),
        ),
        ConstraintDefinition(
            "UsagePurpose",
            (Operator.IS_ANY_OF,),
            (
                _const("CoreLegalRequirementForThirdParty", "cx.core.legalRequirementForThirdparty:1"),
                _const("CoreIndustrycore", "cx.core.industrycore:1"),
                _const("CoreQualityNotifications", "cx.core.qualityNotifications:1"),
                _const("CoreDigitalTwinRegistry", "cx.core.digitalTwinRegistry:1"),
                _const("PcfBase", "cx.pcf.base:1"),
                _const("QualityBase", "cx.quality.base:1"),
                _const("DcmBase", "cx.dcm.base:1"),
                _const("PurisBase", "cx.puris.base:1"),
                _const("CircularDpp", "cx.circular.dpp:1"),
                _const("CircularSmc", "cx.circular.smc:1"),
                _const("CircularMarketplace", "cx.circular.marketplace:1"),
                _const("CircularMaterialaccounting", "cx.circular.materialaccounting:1"),
                _const("BpdmGateUpload", "cx.bpdm.gate.upload:1"),
                _const("BpdmGateDownload", "cx.bpdm.gate.download:1"),
                _const("BpdmPool", "cx.bpdm.pool:1"),
                _const("BpdmVasCountryrisk", "cx.bpdm.vas.countryrisk:1"),
                _const("BpdmVasDataqualityUpload", "cx.bpdm.vas.dataquality.upload:1"),
                _const("BpdmVasDataqualityDownload", "cx.bpdm.vas.dataquality.download:1"),
                _const("BpdmVasBdvUpload", "cx.bpdm.vas.bdv.upload:1"),
                _const("BpdmVasFpdUpload", "cx.bpdm.vas.fpd.upload:1"),
                _const("BpdmVasFpdDownload", "cx.bpdm.vas.fpd.download:1"),
                _const("BpdmVasSwdUpload", "cx.bpdm.vas.swd.upload:1"),
                _const("BpdmVasSwdDownload", "cx.bpdm.vas.swd.download:1"),
                _const("BpdmVasNpsUpload", "cx.bpdm.vas.nps.upload:1"),
                _const("BpdmVasNpsDownload", "cx.bpdm.vas.nps.download:1"),
                _const("CcmBase", "cx.ccm.base:1"),
                _const("BpdmPoolAll", "cx.bpdm.poolAll:1"),
                _const("LogisticsBase", "cx.logistics.base:1"),
                # Individually agreed purposes are free text
                RightOperandDefinition("UsagePurposeIndividual"),
            ),
        ),
        ConstraintDefinition(
            "ContractReference",
            (Operator.IS_ALL_OF,),
            (RightOperandDefinition("ContractReference"),),
        ),
        ConstraintDefinition(
            "AffiliatesRegion",
            (Operator.IS_ANY_OF,),
            (
                _const("RegionAll", "cx.region.all:1"),
                _const("RegionEurope", "cx.region.europe:1"),
                _const("RegionNorthAmerica", "cx.region.northAmerica:1"),
                _const("RegionSouthAmerica", "cx.region.southAmerica:1"),
                _const("RegionAfrica", "cx.region.africa:1"),
                _const("RegionAsia", "cx.region.asia:1"),
                _const("RegionOceania", "cx.region.oceania:1"),
                _const("RegionAntarctica", "cx.region.antarctica:1"),
            ),
        ),
        ConstraintDefinition(
            "AffiliatesBpnl",
            (Operator.IS_ANY_OF,),
            (RightOperandDefinition("AffiliatesBpnl", pattern=BPNL_PATTERN),),
        ),
        ConstraintDefinition(
            "DataFrequency",
            _EQ,
            (
                _const("DataFrequencyOnce", "cx.dataFrequency.once:1"),
                _const("DataFrequencyUnlimited", "cx.dataFrequency.unlimited:1"),
            ),
        ),
        ConstraintDefinition(
            "VersionChanges",
            _EQ,
            (
                _const("VersionChangesMinor", "cx.versionChanges.minor:1"),
                _const("VersionChangesMajor", "cx.versionChanges.major:1"),
            ),
        ),
        ConstraintDefinition(
            "ContractTermination",
            _EQ,
            (
                _const("DataDeletion", "cx.data.deletion:1"),
                _const("DataKeeping", "cx.data.keeping:1"),
            ),
        ),
        ConstraintDefinition(
            "ConfidentialInformationMeasures",
            _EQ,
            (_const("ConfidentialityMeasures", "cx.confidentiality.measures:1"),),
        ),
        ConstraintDefinition(
            "ConfidentialInformationSharing",
            (Operator.IS_ANY_OF,),
            (
                _const("SharingAffiliates", "cx.sharing.affiliates:1"),
                _const("SharingManagedLegalEntity", "cx.sharing.managedLegalEntity:1"),
            ),
        ),
        ConstraintDefinition(
            "ExclusiveUsage",
            _EQ,
            (_const("ExclusiveUsageDataConsumer", "cx.exclusiveUsage.dataConsumer:1"),),
        ),
        ConstraintDefinition(
            "Warranty",
            _EQ,
            (
                _const("WarrantyNone", "cx.warranty.none:1"),
                _const("WarrantyContractReference", "cx.warranty.contractReference:1"),
                _const("WarrantyDataQualityIssues", "cx.warranty.dataQualityIssues:1"),
            ),
        ),
        ConstraintDefinition(
            "WarrantyDurationMonths",
            _EQ,
            (RightOperandDefinition("WarrantyDurationMonths", kind="integer"),),
        ),
        ConstraintDefinition(
            "WarrantyDefinition",
            _EQ,
            (_const("WarrantyContractEndDate", "cx.warranty.contractEndDate:1"),),
        ),
        ConstraintDefinition(
            "Liability",
            _EQ,
            (
                _const("GrossNegligence", "cx.grossNegligence:1"),
                _const("SlightNegligence", "cx.slightNegligence:1"),
            ),
        ),
        ConstraintDefinition(
            "JurisdictionLocation",
            _EQ,
            (RightOperandDefinition("LocationString"),),
        ),
        ConstraintDefinition(
            "JurisdictionLocationReference",
            _EQ,
            (
                _const("LocationDataConsumer", "cx.location.dataConsumer:1"),
                _const("LocationContractReference", "cx.location.contractReference:1"),
            ),
        ),
        ConstraintDefinition(
            "Precedence",
            _EQ,
            (
                _const("PrecedenceContractReference", "cx.precedence.contractReference:1"),
                _const("PrecedenceRcAgreement", "cx.precedence.rcAgreement:1"),
            ),
        ),
        ConstraintDefinition(
            "DataUsageEndDurationDays",
            _EQ,
            (RightOperandDefinition("DataUsageEndDurationDays", kind="integer"),),
        ),
        ConstraintDefinition(
            "DataUsageEndDate",
            _EQ,
            (RightOperandDefinition("DataUsageEndDate", pattern=DATETIME_PATTERN),),
        ),
        ConstraintDefinition(
            "DataUsageEndDefinition",
            _EQ,
            (_const("DataUsageEndUnlimited", "cx.dataUsageEnd.unlimited:1"),),
        ),
        ConstraintDefinition(
            "DataProvisioningEndDurationDays",
            _EQ,
            (RightOperandDefinition("DataProvisioningEndDurationDays", kind="integer"),),
        ),
        ConstraintDefinition(
            "DataProvisioningEndDate",
            _EQ,
            (RightOperandDefinition("DataProvisioningEndDate", pattern=DATETIME_PATTERN),),
        ),
        ConstraintDefinition(
            "UsageRestriction",
            (Operator.IS_ALL_OF,),
            (
                _const("ThirdPartyForbidden", "cx.thirdParty.forbidden:1"),
                _const("ManipulationForbidden", "cx.manipulation.forbidden:1"),
                _const("DerivationsForbidden", "cx.derivations.forbidden:1"),
                _const("ExtraordinaryAnalyticsForbidden", "cx.extraordinaryAnalytics.forbidden:1"),
                _const("DataProviderRemovalForbidden", "cx.dataProviderRemoval.forbidden:1"),
            ),
        ),
    ]
}


# =============================================================================
# Rule sets: which left operands are allowed per action and rule type
# =============================================================================

RULE_SETS: dict[Action, dict[RuleType, frozenset[str]]] = {
    Action.ACCESS: {
        RuleType.PERMISSION: frozenset({
            "FrameworkAgreement",
            "Membership",
            "BusinessPartnerNumber",
            "BusinessPartnerGroup",
        }),
        RuleType.PROHIBITION: frozenset(),
        RuleType.OBLIGATION: frozenset(),
    },
    Action.USE: {
        RuleType.PERMISSION: frozenset({
            "FrameworkAgreement",
            "UsagePurpose",
            "Membership",
            "ContractReference",
            "AffiliatesRegion",
            "AffiliatesBpnl",
            "DataFrequency",
            "VersionChanges",
            "ContractTermination",
            "ConfidentialInformationMeasures",
            "ConfidentialInformationSharing",
            "ExclusiveUsage",
            "Warranty",
            "WarrantyDurationMonths",
            "WarrantyDefinition",
            "Liability",
            "JurisdictionLocation",
            "JurisdictionLocationReference",
            "Precedence",
            "DataUsageEndDurationDays",
            "DataUsageEndDate",
            "DataUsageEndDefinition",
        }),
        RuleType.OBLIGATION: frozenset({
            "DataProvisioningEndDurationDays",
            "DataProvisioningEndDate",
        }),
        RuleType.PROHIBITION: frozenset({
            "AffiliatesRegion",
            "AffiliatesBpnl",
            "UsageRestriction",
        }),
    },
}


def get_constraint(left_operand: str) -> ConstraintDefinition | None:
    return CONSTRAINTS.get(left_operand)


def allowed_left_operands(action: Action, rule_type: RuleType) -> frozenset[str]:
    return RULE_SETS.get(action, {}).get(rule_type, frozenset())
