"""
Wizard config definitions.
In production these would be authored in a CMS; here they are static data in
the wire format (camelCase keys) and validated on load by src.wizard_config.
"""

LEAVE_TYPE_OPTIONS = [
    {"optionId": "opt-preg", "sort": 1, "label": "Pregnancy & Adoption", "value": "pregnancy-adoption"},
    {"optionId": "opt-medical", "sort": 2, "label": "Medical Leave", "value": "medical"},
    {"optionId": "opt-family", "sort": 3, "label": "Family Care", "value": "family-care"},
]

LEAVE_DURATION_OPTIONS = [
    {"optionId": "opt-6w", "sort": 1, "label": "6 weeks", "value": "6_weeks"},
    {"optionId": "opt-8w", "sort": 2, "label": "8 weeks", "value": "8_weeks"},
    {"optionId": "opt-12w", "sort": 3, "label": "12 weeks", "value": "12_weeks"},
]

WORK_STATE_OPTIONS = [
    {"optionId": "opt-ca", "sort": 1, "label": "California", "value": "CA"},
    {"optionId": "opt-ny", "sort": 2, "label": "New York", "value": "NY"},
    {"optionId": "opt-tx", "sort": 3, "label": "Texas", "value": "TX"},
    {"optionId": "opt-other", "sort": 4, "label": "Other", "value": "OTHER"},
]


# Unified leave intake: the leave type is the first, unconditional step and
# every later step is gated by a rule over the answers collected so far.
LEAVE_INTAKE_CONFIG = {
    "wizardId": "leave-intake-v1",
    "wizardName": "Leave of Absence Request",
    "steps": [
        {
            "stepId": "step-leave-type",
            "sort": 1,
            "name": "leave-type-selection",
            "title": "Leave Type",
            "semanticTag": "INTAKE:STEP:LEAVE_TYPE",
        },
        {
            "stepId": "step-leave-dates",
            "sort": 2,
            "name": "leave-dates",
            "title": "Leave Dates",
            "semanticTag": "INTAKE:STEP:LEAVE_DATES",
            "rule": "INTAKE:QUESTION:LEAVE_TYPE is provided",
        },
        {
            "stepId": "step-work-info",
            "sort": 3,
            "name": "work-info",
            "title": "Work Information",
            "semanticTag": "INTAKE:STEP:WORK_INFO",
            "rule": "INTAKE:QUESTION:EXPECTED_DATE is provided",
        },
        {
            "stepId": "step-medical-docs",
            "sort": 4,
            "name": "medical-documentation",
            "title": "Medical Documentation",
            "semanticTag": "INTAKE:STEP:MEDICAL_DOCS",
            "rule": 'INTAKE:QUESTION:LEAVE_TYPE equals "medical"',
            "ruleContext": "This step collects medical documentation details for medical leave requests.",
        },
        {
            "stepId": "step-family-member",
            "sort": 5,
            "name": "family-member-info",
            "title": "Family Member Information",
            "semanticTag": "INTAKE:STEP:FAMILY_MEMBER",
            "rule": 'INTAKE:QUESTION:LEAVE_TYPE equals "family-care"',
            "ruleContext": "This step collects information about the family member requiring care.",
        },
        {
            "stepId": "step-cfra",
            "sort": 6,
            "name": "cfra-eligibility",
            "title": "CFRA Eligibility",
            "semanticTag": "INTAKE:STEP:CFRA",
            "rule": (
                'INTAKE:QUESTION:LEAVE_TYPE equals "pregnancy-adoption" '
                'AND INTAKE:QUESTION:WORK_STATE equals "CA"'
            ),
            "ruleContext": (
                "CFRA provides additional leave protections for California employees "
                "taking pregnancy/adoption leave."
            ),
        },
        {
            "stepId": "step-extended-leave",
            "sort": 7,
            "name": "extended-leave-approval",
            "title": "Extended Leave Approval",
            "semanticTag": "INTAKE:STEP:EXTENDED_LEAVE",
            "rule": (
                'INTAKE:QUESTION:LEAVE_DURATION equals "12_weeks" AND '
                '(INTAKE:QUESTION:LEAVE_TYPE equals "pregnancy-adoption" '
                'OR INTAKE:QUESTION:LEAVE_TYPE equals "medical")'
            ),
            "ruleContext": "Extended leave of 12 weeks requires additional approval and HR coordination.",
        },
        {
            "stepId": "step-ny-pfl",
            "sort": 8,
            "name": "ny-paid-family-leave",
            "title": "NY Paid Family Leave",
            "semanticTag": "INTAKE:STEP:NY_PFL",
            "rule": (
                'INTAKE:QUESTION:WORK_STATE equals "NY" AND '
                'INTAKE:QUESTION:LEAVE_TYPE is NOT "family-care"'
            ),
            "ruleContext": "New York provides Paid Family Leave benefits for pregnancy and medical leave.",
        },
        {
            "stepId": "step-review",
            "sort": 9,
            "name": "review",
            "title": "Review & Submit",
            "semanticTag": "INTAKE:STEP:REVIEW",
        },
    ],
    "elements": [
        # Leave type
        {
            "elementId": "el-leave-type",
            "stepId": "step-leave-type",
            "type": "question",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "questionId": "q-leave-type",
                "semanticTag": "INTAKE:QUESTION:LEAVE_TYPE",
                "componentTypeKey": "select",
                "questionText": "Select your leave type",
                "options": LEAVE_TYPE_OPTIONS,
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-leave-duration",
            "stepId": "step-leave-type",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-leave-duration",
                "semanticTag": "INTAKE:QUESTION:LEAVE_DURATION",
                "componentTypeKey": "select",
                "questionText": "How long do you plan to take leave?",
                "options": LEAVE_DURATION_OPTIONS,
                "validation": ["required"],
            },
        },
        # Leave dates
        {
            "elementId": "el-expected-date",
            "stepId": "step-leave-dates",
            "type": "question",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "questionId": "q-expected-date",
                "semanticTag": "INTAKE:QUESTION:EXPECTED_DATE",
                "componentTypeKey": "datePicker",
                "questionText": "When do you expect your leave to start?",
                "helperText": "Approximate date is fine.",
                "validation": ["required", "futureDate"],
            },
        },
        # Work information
        {
            "elementId": "el-work-state",
            "stepId": "step-work-info",
            "type": "question",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "questionId": "q-work-state",
                "semanticTag": "INTAKE:QUESTION:WORK_STATE",
                "componentTypeKey": "select",
                "questionText": "In which state do you primarily work?",
                "options": WORK_STATE_OPTIONS,
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-manager-name",
            "stepId": "step-work-info",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-manager-name",
                "semanticTag": "INTAKE:QUESTION:MANAGER_NAME",
                "componentTypeKey": "text",
                "questionText": "What is your manager's name?",
                "validation": ["required"],
            },
        },
        # Medical documentation
        {
            "elementId": "el-medical-info",
            "stepId": "step-medical-docs",
            "type": "info",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-medical",
                "title": "Medical Documentation Required",
                "content": (
                    "Please provide information about your medical provider and condition type. "
                    "You will need to submit official documentation within 15 days of your "
                    "leave start date."
                ),
            },
        },
        {
            "elementId": "el-physician-name",
            "stepId": "step-medical-docs",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-physician-name",
                "semanticTag": "INTAKE:QUESTION:PHYSICIAN_NAME",
                "componentTypeKey": "text",
                "questionText": "What is your treating physician's name?",
                "helperText": "Enter the full name of your primary care provider or specialist.",
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-condition-type",
            "stepId": "step-medical-docs",
            "type": "question",
            "sort": 3,
            "isVisible": True,
            "attributes": {
                "questionId": "q-condition-type",
                "semanticTag": "INTAKE:QUESTION:CONDITION_TYPE",
                "componentTypeKey": "select",
                "questionText": "What type of medical condition requires leave?",
                "options": [
                    {"optionId": "opt-surgery", "sort": 1, "label": "Scheduled Surgery", "value": "surgery"},
                    {"optionId": "opt-illness", "sort": 2, "label": "Serious Illness", "value": "illness"},
                    {"optionId": "opt-injury", "sort": 3, "label": "Injury/Accident", "value": "injury"},
                    {"optionId": "opt-chronic", "sort": 4, "label": "Chronic Condition", "value": "chronic"},
                ],
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-medical-certification",
            "stepId": "step-medical-docs",
            "type": "document",
            "sort": 4,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "document",
                "name": "Medical Certification Form",
                "fileName": "medical-certification.pdf",
                "downloadUrl": "/documents/medical-certification.pdf",
            },
        },
        # Family member
        {
            "elementId": "el-family-info",
            "stepId": "step-family-member",
            "type": "info",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-family",
                "title": "Family Care Leave",
                "content": (
                    "Family care leave allows you to care for a qualifying family member "
                    "with a serious health condition."
                ),
            },
        },
        {
            "elementId": "el-family-relationship",
            "stepId": "step-family-member",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-family-relationship",
                "semanticTag": "INTAKE:QUESTION:FAMILY_RELATIONSHIP",
                "componentTypeKey": "select",
                "questionText": "What is your relationship to the family member?",
                "options": [
                    {"optionId": "opt-spouse", "sort": 1, "label": "Spouse/Domestic Partner", "value": "spouse"},
                    {"optionId": "opt-child", "sort": 2, "label": "Child", "value": "child"},
                    {"optionId": "opt-parent", "sort": 3, "label": "Parent", "value": "parent"},
                    {"optionId": "opt-sibling", "sort": 4, "label": "Sibling", "value": "sibling"},
                ],
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-family-condition",
            "stepId": "step-family-member",
            "type": "question",
            "sort": 3,
            "isVisible": True,
            "attributes": {
                "questionId": "q-family-condition",
                "semanticTag": "INTAKE:QUESTION:FAMILY_CONDITION",
                "componentTypeKey": "select",
                "questionText": "What is the nature of their health condition?",
                "options": [
                    {"optionId": "opt-fam-surgery", "sort": 1, "label": "Surgery/Recovery", "value": "surgery"},
                    {"optionId": "opt-fam-illness", "sort": 2, "label": "Serious Illness", "value": "illness"},
                    {"optionId": "opt-fam-hospice", "sort": 3, "label": "Hospice/End of Life", "value": "hospice"},
                    {"optionId": "opt-fam-chronic", "sort": 4, "label": "Chronic Condition", "value": "chronic"},
                ],
                "validation": ["required"],
            },
        },
        # CFRA
        {
            "elementId": "el-cfra-info",
            "stepId": "step-cfra",
            "type": "info",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-cfra",
                "title": "California Family Rights Act (CFRA)",
                "content": (
                    "As a California employee, you may be eligible for additional leave "
                    "protections under CFRA."
                ),
            },
        },
        {
            "elementId": "el-cfra-acknowledge",
            "stepId": "step-cfra",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-cfra-acknowledge",
                "semanticTag": "INTAKE:QUESTION:CFRA_ACKNOWLEDGE",
                "componentTypeKey": "checkbox",
                "questionText": "I acknowledge that I have read the CFRA information.",
                "validation": ["required"],
            },
        },
        # Extended leave
        {
            "elementId": "el-extended-info",
            "stepId": "step-extended-leave",
            "type": "info",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-extended",
                "title": "Extended Leave (12 Weeks)",
                "content": (
                    "Extended leave of 12 weeks requires additional coordination with HR and "
                    "may affect your benefits. Please review the information below and acknowledge."
                ),
            },
        },
        {
            "elementId": "el-extended-acknowledge",
            "stepId": "step-extended-leave",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-extended-acknowledge",
                "semanticTag": "INTAKE:QUESTION:EXTENDED_ACKNOWLEDGE",
                "componentTypeKey": "checkbox",
                "questionText": (
                    "I understand that 12-week leave requires HR approval and I will schedule "
                    "a call with my HR representative."
                ),
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-hr-contact-preference",
            "stepId": "step-extended-leave",
            "type": "question",
            "sort": 3,
            "isVisible": True,
            "attributes": {
                "questionId": "q-hr-contact-preference",
                "semanticTag": "INTAKE:QUESTION:HR_CONTACT_PREFERENCE",
                "componentTypeKey": "select",
                "questionText": "How would you prefer HR to contact you?",
                "options": [
                    {"optionId": "opt-email", "sort": 1, "label": "Email", "value": "email"},
                    {"optionId": "opt-phone", "sort": 2, "label": "Phone Call", "value": "phone"},
                    {"optionId": "opt-video", "sort": 3, "label": "Video Meeting", "value": "video"},
                ],
                "validation": ["required"],
            },
        },
        # NY PFL
        {
            "elementId": "el-ny-pfl-info",
            "stepId": "step-ny-pfl",
            "type": "info",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-ny-pfl",
                "title": "New York Paid Family Leave (NY PFL)",
                "content": (
                    "As a New York employee, you may be eligible for Paid Family Leave benefits "
                    "which provide partial wage replacement during your leave. NY PFL covers up "
                    "to 12 weeks of paid leave."
                ),
            },
        },
        {
            "elementId": "el-ny-pfl-apply",
            "stepId": "step-ny-pfl",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-ny-pfl-apply",
                "semanticTag": "INTAKE:QUESTION:NY_PFL_APPLY",
                "componentTypeKey": "select",
                "questionText": "Would you like to apply for NY Paid Family Leave benefits?",
                "options": [
                    {"optionId": "opt-pfl-yes", "sort": 1, "label": "Yes, I want to apply for NY PFL", "value": "yes"},
                    {"optionId": "opt-pfl-no", "sort": 2, "label": "No, I do not need PFL benefits", "value": "no"},
                    {"optionId": "opt-pfl-later", "sort": 3, "label": "I'll decide later", "value": "later"},
                ],
                "validation": ["required"],
            },
        },
        # Review
        {
            "elementId": "el-review-info",
            "stepId": "step-review",
            "type": "info",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-review",
                "title": "Review Your Information",
                "content": "Please review your leave request details before submitting.",
            },
        },
    ],
}


# Pregnancy & adoption only flow (kept registered for teams still linking to it)
PREG_ADOPTION_CONFIG = {
    "wizardId": "preg-adoption-v1",
    "wizardName": "Pregnancy & Adoption Leave",
    "steps": [
        {
            "stepId": "step-001",
            "sort": 1,
            "name": "leave-dates",
            "title": "Leave Dates",
            "semanticTag": "PREG:STEP:LEAVE_DATES",
        },
        {
            "stepId": "step-002",
            "sort": 2,
            "name": "work-info",
            "title": "Work Information",
            "semanticTag": "PREG:STEP:WORK_INFO",
            "rule": "PREG:QUESTION:EXPECTED_DATE is provided",
        },
        {
            "stepId": "step-cfra",
            "sort": 3,
            "name": "cfra-eligibility",
            "title": "CFRA Eligibility",
            "semanticTag": "PREG:STEP:CFRA",
            "rule": 'PREG:QUESTION:WORK_STATE equals "CA"',
        },
        {
            "stepId": "step-003",
            "sort": 4,
            "name": "review",
            "title": "Review & Submit",
            "semanticTag": "PREG:STEP:REVIEW",
        },
    ],
    "elements": [
        {
            "elementId": "el-expected-date",
            "stepId": "step-001",
            "type": "question",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "questionId": "q-expected-date",
                "semanticTag": "PREG:QUESTION:EXPECTED_DATE",
                "componentTypeKey": "datePicker",
                "questionText": "What is your expected due date or adoption date?",
                "helperText": "Approximate date is fine.",
                "validation": ["required", "futureDate"],
            },
        },
        {
            "elementId": "el-work-state",
            "stepId": "step-002",
            "type": "question",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "questionId": "q-work-state",
                "semanticTag": "PREG:QUESTION:WORK_STATE",
                "componentTypeKey": "select",
                "questionText": "In which state do you primarily work?",
                "options": WORK_STATE_OPTIONS,
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-manager-name",
            "stepId": "step-002",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-manager-name",
                "semanticTag": "PREG:QUESTION:MANAGER_NAME",
                "componentTypeKey": "text",
                "questionText": "What is your manager's name?",
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-cfra-info",
            "stepId": "step-cfra",
            "type": "info",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-cfra",
                "title": "California Family Rights Act (CFRA)",
                "content": (
                    "As a California employee, you may be eligible for additional leave "
                    "protections under CFRA."
                ),
            },
        },
        {
            "elementId": "el-cfra-acknowledge",
            "stepId": "step-cfra",
            "type": "question",
            "sort": 2,
            "isVisible": True,
            "attributes": {
                "questionId": "q-cfra-acknowledge",
                "semanticTag": "PREG:QUESTION:CFRA_ACKNOWLEDGE",
                "componentTypeKey": "checkbox",
                "questionText": "I acknowledge that I have read the CFRA information.",
                "validation": ["required"],
            },
        },
        {
            "elementId": "el-review-info",
            "stepId": "step-003",
            "type": "info",
            "sort": 1,
            "isVisible": True,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-review",
                "title": "Review Your Information",
                "content": "Please review your leave request details before submitting.",
            },
        },
    ],
}


WIZARD_CONFIGS = {
    LEAVE_INTAKE_CONFIG["wizardId"]: LEAVE_INTAKE_CONFIG,
    PREG_ADOPTION_CONFIG["wizardId"]: PREG_ADOPTION_CONFIG,
}


def get_wizard_config_data(wizard_id: str) -> dict | None:
    """
    Get the raw definition of a wizard.

    Args:
        wizard_id: Wizard identifier, e.g. "leave-intake-v1"

    Returns:
        Raw config dict or None if no wizard is registered under that id
    """
    return WIZARD_CONFIGS.get(wizard_id)
