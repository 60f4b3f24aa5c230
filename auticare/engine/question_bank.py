# auticare/engine/question_bank.py
#
# Built-in scoring configuration. Weights, bands and actions are config, not code:
# bump "version" whenever any number here changes so persisted results stay traceable.

_CAREGIVER_QUESTIONS = [
    {"id": "par_1", "category": "social_communication",
     "text": "Does your child avoid making eye contact when you talk to them?"},
    {"id": "par_2", "category": "social_communication",
     "text": "Does your child not respond when their name is called?"},
    {"id": "par_3", "category": "social_communication",
     "text": "Does your child not point to show you things they find interesting?"},
    {"id": "par_4", "category": "social_interaction",
     "text": "Does your child prefer to play alone rather than with other children?"},
    {"id": "par_5", "category": "social_interaction",
     "text": "Does your child find it hard to take turns in games or conversation?"},
    {"id": "par_6", "category": "social_interaction",
     "text": "Does your child seem unaware of how other people are feeling?"},
    {"id": "par_7", "category": "repetitive_behavior",
     "text": "Does your child repeat the same movements, such as hand flapping or rocking?"},
    {"id": "par_8", "category": "repetitive_behavior",
     "text": "Does your child line up toys or objects in a particular order?"},
    {"id": "par_9", "category": "repetitive_behavior",
     "text": "Does your child repeat words or phrases they have heard (echolalia)?"},
    {"id": "par_10", "category": "routine",
     "text": "Does your child become very upset by small changes in routine?"},
    {"id": "par_11", "category": "routine",
     "text": "Does your child insist on following the same route or ritual every time?"},
    {"id": "par_12", "category": "sensory",
     "text": "Does your child cover their ears or get distressed by everyday sounds?"},
    {"id": "par_13", "category": "sensory",
     "text": "Is your child unusually sensitive to clothing textures, light or food textures?"},
    {"id": "par_14", "category": "sensory",
     "text": "Does your child seek out unusual sensory input, such as sniffing or spinning objects?"},
    {"id": "par_15", "category": "emotional_regulation",
     "text": "Does your child have intense meltdowns that are hard to soothe?"},
    {"id": "par_16", "category": "emotional_regulation",
     "text": "Does your child struggle to calm down after becoming upset?"},
    {"id": "par_17", "category": "development",
     "text": "Is your child's speech or language delayed compared with peers?"},
    {"id": "par_18", "category": "development",
     "text": "Has your child lost words or skills they previously had?"},
    {"id": "par_19", "category": "attention",
     "text": "Does your child focus intensely on one topic or object for long periods?"},
    {"id": "par_20", "category": "family_history",
     "text": "Is there a family history of autism or related developmental conditions?"},
]

SCORING_CONFIG = {
    "version": "2025.12-v1",
    "top_k": 3,
    "questions": {
        "individual": [
            {"id": "ind_1", "category": "social_communication",
             "text": "I find it difficult to understand what others mean when they hint at something."},
            {"id": "ind_2", "category": "social_communication",
             "text": "I find it hard to keep a conversation going."},
            {"id": "ind_3", "category": "social_interaction",
             "text": "I find social situations confusing or exhausting."},
            {"id": "ind_4", "category": "social_interaction",
             "text": "I find it hard to make new friends."},
            {"id": "ind_5", "category": "social_interaction",
             "text": "I find it hard to work out what someone is thinking or feeling from their face."},
            {"id": "ind_6", "category": "repetitive_behavior",
             "text": "I notice patterns in things all the time and find it hard to stop noticing them."},
            {"id": "ind_7", "category": "repetitive_behavior",
             "text": "I repeat certain movements or sounds when I am stressed or excited."},
            {"id": "ind_8", "category": "routine",
             "text": "I get upset if my daily routine is disturbed."},
            {"id": "ind_9", "category": "sensory",
             "text": "I am bothered by sounds, lights or textures that others do not seem to notice."},
            {"id": "ind_10", "category": "emotional_regulation",
             "text": "I feel overwhelmed and need to withdraw to calm down."},
            {"id": "ind_11", "category": "attention",
             "text": "I get so absorbed in one thing that I lose track of everything else."},
            {"id": "ind_12", "category": "attention",
             "text": "I find it hard to switch attention from one task to another."},
        ],
        "parent": _CAREGIVER_QUESTIONS,
        "clinician": _CAREGIVER_QUESTIONS,
    },
    "weights": {
        "individual": {
            "ind_1": 1.2, "ind_2": 1.0, "ind_3": 1.3, "ind_4": 1.0,
            "ind_5": 1.4, "ind_6": 1.1, "ind_7": 1.2, "ind_8": 1.2,
            "ind_9": 1.1, "ind_10": 0.9, "ind_11": 0.8, "ind_12": 0.8,
        },
        "parent": {
            "par_1": 1.5, "par_2": 1.5, "par_3": 1.4, "par_4": 1.2, "par_5": 1.0,
            "par_6": 1.2, "par_7": 1.3, "par_8": 1.1, "par_9": 1.0, "par_10": 1.1,
            "par_11": 1.0, "par_12": 1.0, "par_13": 0.9, "par_14": 0.9, "par_15": 0.8,
            "par_16": 0.8, "par_17": 1.3, "par_18": 1.5, "par_19": 0.9, "par_20": 1.0,
        },
        # Clinicians report observed behaviour; regression and joint attention
        # items carry more weight, self-regulation less.
        "clinician": {
            "par_1": 1.6, "par_2": 1.6, "par_3": 1.6, "par_4": 1.2, "par_5": 1.1,
            "par_6": 1.3, "par_7": 1.4, "par_8": 1.1, "par_9": 1.1, "par_10": 1.0,
            "par_11": 1.0, "par_12": 0.9, "par_13": 0.8, "par_14": 0.9, "par_15": 0.7,
            "par_16": 0.7, "par_17": 1.4, "par_18": 1.8, "par_19": 0.9, "par_20": 1.0,
        },
    },
    "adjustments": {
        "family_history": {
            # role -> trigger; only caregivers are asked about family history
            "triggers": {"parent": {"question_id": "par_20", "value": "always"}},
            "boost": 10,
        },
    },
    "actions": {
        "social_communication": "Practise short back-and-forth exchanges using visual prompts and model gestures.",
        "social_interaction": "Arrange structured, small-group play or social activities with a familiar adult present.",
        "repetitive_behavior": "Note when repetitive behaviours occur and offer a calming alternative rather than stopping them.",
        "routine": "Use a visual schedule and give advance warning before changes to the routine.",
        "sensory": "Identify sensory triggers and prepare tools such as ear defenders or a quiet corner.",
        "emotional_regulation": "Build a calm-down plan with breathing exercises and a safe, low-stimulus space.",
        "development": "Discuss speech and developmental milestones with a paediatrician or speech therapist.",
        "attention": "Use special interests as a bridge into new activities and give clear transition cues.",
        "family_history": "Share the family history with your healthcare provider during the next screening.",
    },
    "default_action": "Discuss this area with a healthcare professional.",
    "fusion": {
        "questionnaire_weight": 0.6,
        "secondary_weight": 0.4,
    },
    # Lower bound inclusive; a band runs up to the next band's lower bound.
    "severity_bands": [
        {
            "level": "low", "label": "Low Likelihood", "min": 0, "schedule_tasks": 7,
            "recommendations": [
                "Continue monitoring development",
                "Maintain supportive routines",
            ],
        },
        {
            "level": "mild", "label": "Mild Indicators", "min": 25, "schedule_tasks": 6,
            "recommendations": [
                "Consider scheduling a screening",
                "Document behaviors and patterns",
                "Explore supportive resources",
            ],
        },
        {
            "level": "moderate", "label": "Moderate Indicators", "min": 50, "schedule_tasks": 5,
            "recommendations": [
                "Schedule comprehensive evaluation",
                "Consider early intervention services",
                "Connect with support groups",
            ],
        },
        {
            "level": "high", "label": "High Indicators", "min": 75, "schedule_tasks": 4,
            "recommendations": [
                "Seek clinical assessment immediately",
                "Contact healthcare provider",
                "Connect with autism specialist",
                "Explore immediate support resources",
            ],
        },
    ],
}
