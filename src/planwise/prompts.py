"""
Prompt templates for the analysis workflow.

Each plan type has a system prompt describing the JSON schema, one
few-shot example (note + expected JSON) and a closing instruction. The
workflow forwards `messagesForModel` to the model as-is.
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from planwise.core.models import PlanType


@dataclass(frozen=True)
class PromptTemplate:
    """System prompt plus a single few-shot exchange."""

    system: str
    example_user: str
    example_assistant: str
    instruction: str


GENERAL_TEMPLATE = PromptTemplate(
    system="\n".join(
        [
            "أنت مساعد خبير في علم نفس وتطوير الطفل وموجه للمعلمات (Arabic).",
            "**المهمة:** اقرأ الملاحظة والبيانات المرفقة (Relevant curriculum إن وُجد) ثم أعد ناتجًا بصيغة JSON فقط — وصِف خطة تعليمية عملية ومفصّلة قابلة للتطبيق من قِبل معلمة أو ولي أمر.",
            "",
            "**Output MUST be valid JSON** and must contain the following keys (use empty array or empty string if غير متوفر):",
            "{",
            '  "smart_goal", "teaching_strategy", "task_analysis_steps", "subgoals", "activities",',
            '  "execution_plan", "reinforcement", "measurement", "generalization_plan", "accommodations",',
            '  "suggestions", "customizations", "summary", "parent_instructions"',
            "}",
            "",
            "Return JSON ONLY — no extra text. Keep arrays short and items actionable.",
        ]
    ),
    example_user="\n".join(
        [
            "Example note:",
            "Child: هاجر",
            "Age: 5",
            "Domain: التواصل/اللغة",
            "Goal: طلب الشيء (باستخدام جملة قصيرة)",
            "Observation: الطفل يستخدم كلمات منفردة فقط، يحتاج دعم للتواصل التلقائي.",
        ]
    ),
    example_assistant=json.dumps(
        {
            "smart_goal": "خلال شهر، سيقوم الطفل هاجر بطلب الشيء باستخدام جملة قصيرة مكوّنة من كلمتين مـعتمدة في 80% من المحاولات.",
            "teaching_strategy": "التلقين البصري واللفظي مع التحفيز الاجتماعي",
            "task_analysis_steps": ["تحديد الشيء", "إشارة", "نموذج لفظي 'أريد + اسم'", "تشجيع ومكافأة"],
            "subgoals": ["الأسبوع 1: نموذج لفظي + بصري", "الأسبوع 2: تقليل المساعدة"],
            "activities": [{"type": "بطاقات", "name": "بطاقات تسلسل الطلب"}],
            "execution_plan": ["تهيئة (2 دقيقة)", "تطبيق (4-6 محاولات)"],
            "reinforcement": {"type": "مكافأة فورية", "schedule": "بعد كل نجاحين"},
            "measurement": {"type": "Accuracy", "sheet": "تسجيل (+/P/-)"},
            "generalization_plan": ["التطبيق في المنزل مع ولي الأمر"],
            "accommodations": ["مؤقت بصري"],
            "suggestions": ["استخدام نموذج لفظي ثابت"],
            "customizations": ["تقسيم النشاط"],
            "summary": "الطفل يحتاج نمذجة لفظية وبصرية متكررة.",
            "parent_instructions": "تمرن 5 دقائق يوميًا مع ولي الأمر",
        },
        ensure_ascii=False,
        indent=2,
    ),
    instruction="حللي الملاحظة التالية وارجعي JSON مطابق للـ schema أعلاه (لا تخرجي عن شكل JSON):",
)


BEHAVIOR_TEMPLATE = PromptTemplate(
    system="\n".join(
        [
            "أنت خبير تحليل سلوكي (BCBA-like) ومصمم خطط تدخل سلوكي (BIP) باللغة العربية.",
            "**المهمة:** اقرأ الملاحظة والبيانات ثم أعد ناتجًا بصيغة JSON ONLY. يجب أن يُرجع JSON بمخطط BIP واضح وقابل للتطبيق من قبل معلمة أو ولي أمر.",
            "",
            "**قواعد صارمة:**",
            "1. لا تكرر نص الملاحظة الأصلية في أي حقل",
            "2. كل حقل يجب أن يحتوي على محتوى جديد ومفيد",
            "3. استخدم لغة مختصرة ومحددة",
            '4. تجنب العبارات العامة مثل "لا توجد بيانات"',
            "5. قدم حلول عملية قابلة للتطبيق",
            "",
            "**Output MUST be valid JSON** and must contain these keys:",
            "{",
            '  "behavior_goal": "هدف سلوكي محدد وقابل للقياس",',
            '  "summary": "ملخص مختصر للسلوك والوظيفة",',
            '  "antecedents": ["قائمة المثيرات التي تسبق السلوك"],',
            '  "consequences": ["قائمة العواقب التي تلي السلوك"],',
            '  "function_analysis": "تحليل وظيفة السلوك (انتباه/هروب/حصول على شيء/حسي)",',
            '  "antecedent_strategies": ["استراتيجيات منع السلوك قبل حدوثه"],',
            '  "replacement_behavior": {"skill": "المهارة البديلة", "modality": "طريقة التطبيق"},',
            '  "consequence_strategies": ["استراتيجيات الاستجابة للسلوك"],',
            '  "data_collection": {"metric": "طريقة القياس", "tool": "أداة التسجيل"},',
            '  "review_after_days": 14,',
            '  "safety_flag": false,',
            '  "suggestions": ["اقتراحات إضافية للتحسين"],',
            '  "customizations": ["تعديلات مخصصة للطفل"],',
            '  "parent_instructions": "تعليمات واضحة لولي الأمر"',
            "}",
            "",
            "Return JSON ONLY — nothing else.",
        ]
    ),
    example_user="\n".join(
        [
            "Example note:",
            "Child: أحمد",
            "Age: 8",
            "Domain: سلوك",
            "Observation: الطفل لا يصلي عند سماع الأذان ويفضل اللعب حتى يُذكّر عدة مرات.",
            "Antecedent: سماع الأذان، انشغال باللعب",
            "Behavior: تجاهل الأذان والاستمرار في اللعب",
            "Consequence: تذكير متكرر من الأهل، انتباه إضافي",
        ]
    ),
    example_assistant=json.dumps(
        {
            "behavior_goal": "خلال أسبوعين، سيقوم الطفل بأداء الصلاة فور سماع الأذان في 85% من المرات دون تذكير",
            "summary": "السلوك يظهر لتجنب الصلاة والاستمرار في اللعب؛ الوظيفة: هروب من المطالب الدينية",
            "antecedents": ["سماع الأذان", "انشغال باللعب", "عدم وجود روتين صلاة ثابت"],
            "consequences": ["تذكير متكرر من الأهل", "انتباه إضافي عند التأخير", "تأجيل الصلاة"],
            "function_analysis": "الوظيفة: هروب/تجنب من مطالب الصلاة",
            "antecedent_strategies": [
                "إعداد بيئة صلاة هادئة قبل الأذان",
                "إنشاء روتين بصري للصلاة",
                "تذكير بصري قبل الأذان بـ5 دقائق",
            ],
            "replacement_behavior": {"skill": "الذهاب للصلاة فور سماع الأذان", "modality": "حركة مستقلة"},
            "consequence_strategies": [
                "تعزيز فوري عند الصلاة في الوقت",
                "تجاهل التأخير وتذكير مرة واحدة فقط",
                "مكافأة خاصة للصلاة في الوقت",
            ],
            "data_collection": {"metric": "نسبة الصلاة في الوقت", "tool": "جدول يومي بسيط"},
            "review_after_days": 14,
            "safety_flag": False,
            "suggestions": ["استخدام مؤقت بصري للصلاة", "ربط الصلاة بنشاط محبب"],
            "customizations": ["تبسيط خطوات الوضوء", "استخدام سجادة صلاة ملونة"],
            "parent_instructions": "تطبيق نفس الروتين في المنزل، مكافأة فورية عند الصلاة في الوقت",
        },
        ensure_ascii=False,
        indent=2,
    ),
    instruction=(
        "حللي الملاحظة التالية سلوكياً وارجعي JSON مطابق للـ schema أعلاه. تأكد من:\n"
        "1. عدم تكرار نص الملاحظة\n"
        "2. ملء جميع الحقول بمحتوى مفيد\n"
        "3. تقديم حلول عملية قابلة للتطبيق"
    ),
)


TEMPLATES: dict[PlanType, PromptTemplate] = {
    PlanType.GENERAL: GENERAL_TEMPLATE,
    PlanType.BEHAVIOR: BEHAVIOR_TEMPLATE,
}


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_note_content(
    text_note: str | None,
    current_activity: str | None = None,
    energy_level: str | None = None,
    tags: Sequence[str] = (),
    session_duration: float = 0,
) -> str:
    """Render the observation fields as the note block sent to the model."""
    return "\n".join(
        [
            f"Child activity: {current_activity or 'غير محدد'}",
            f"Energy level: {energy_level or ''}",
            f"Tags: {', '.join(tags) or 'لا يوجد'}",
            f"Session duration: {_format_number(session_duration)} دقيقة",
            f"Note text: {text_note or ''}",
        ]
    )


def build_messages(
    plan_type: PlanType,
    note_content: str,
    relevant_curriculum: str = "",
) -> list[dict[str, str]]:
    """
    Build the chat message list for one analysis.

    Args:
        plan_type: Which schema the model is asked for
        note_content: Output of `build_note_content`
        relevant_curriculum: Curriculum excerpt appended to the system prompt

    Returns:
        system, few-shot user, few-shot assistant and final user messages
    """
    template = TEMPLATES[plan_type]
    system = template.system
    if relevant_curriculum:
        system += "\n\nRelevant curriculum:\n" + relevant_curriculum

    return [
        {"role": "system", "content": system},
        {"role": "user", "content": template.example_user},
        {"role": "assistant", "content": template.example_assistant},
        {"role": "user", "content": f"{template.instruction}\n\n{note_content}"},
    ]
