from enum import Enum


class WizardStageEnum(str, Enum):
    basics = "basics"
    targeting = "targeting"
    messaging = "messaging"
    templates = "templates"
    sequence = "sequence"
    review = "review"


class TemplateMatchingModeEnum(str, Enum):
    intelligent = "intelligent"
    random = "random"


class TrustSignalKindEnum(str, Enum):
    metric = "metric"
    case_study = "case_study"
    testimonial = "testimonial"
    logo = "logo"


class TemplateToneEnum(str, Enum):
    informal = "informal"
    formal = "formal"
    energetic = "energetic"
    humble = "humble"


class TemplateStructureEnum(str, Enum):
    problem_solution = "problem_solution"
    value_prop_first = "value_prop_first"
    social_proof = "social_proof"
    question_based = "question_based"


class TemplateCtaTypeEnum(str, Enum):
    soft_ask = "soft_ask"
    direct_meeting = "direct_meeting"
    resource_offer = "resource_offer"
    question = "question"


class CampaignStatusEnum(str, Enum):
    draft = "draft"
    pending_review = "pending_review"
    approved = "approved"
    active = "active"
    paused = "paused"
    completed = "completed"
    cancelled = "cancelled"


class SendDayEnum(str, Enum):
    mon = "mon"
    tue = "tue"
    wed = "wed"
    thu = "thu"
    fri = "fri"
    sat = "sat"
    sun = "sun"
