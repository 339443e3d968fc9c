"""
Offline Responses - Templated replies used when no provider answers.

An ordered rule table of (category, predicate, templates). Rules are
evaluated top to bottom against the lower-cased message and the first
match wins; the default category always matches. Within a category the
variant is picked deterministically from the message and the length of
the remembered history, so the same request always gets the same reply.

Templates are str.format strings over a fixed set of fields:
    {name}             user's first name, or "there"
    {persona_name}     e.g. "Career Mentor Alex"
    {persona_style}    persona response style
    {specializations}  comma-joined persona specializations
    {opening}          persona-dependent lead-in line
    {topics_clause}    sentence about remembered topics (may be empty)
    {goals_clause}     sentence about remembered goals (may be empty)
    {history_clause}   sentence acknowledging a continued chat (may be empty)
"""
import re
import zlib
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from career_assistant.core.logging_config import get_logger
from career_assistant.llm.personas import Persona, PERSONAS, DEFAULT_PERSONA
from career_assistant.memory.conversation import Memory

logger = get_logger(__name__)

Predicate = Callable[[str], bool]


def _contains(*keywords: str) -> Predicate:
    return lambda text: any(keyword in text for keyword in keywords)


def _words(*words: str) -> Predicate:
    pattern = re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b")
    return lambda text: pattern.search(text) is not None


def _is_short(text: str) -> bool:
    return len(text) <= 3 or text.isdigit()


def _always(text: str) -> bool:
    return True


AI_TEMPLATES = (
    """Great timing to ask about AI careers, {name}! AI and machine learning are opening roles in almost every industry.

**Growing AI career paths:**
- Machine Learning Engineer - build and ship models
- MLOps Engineer - deploy and monitor AI systems
- Data Scientist - turn data into decisions
- AI Product Manager - connect business needs with technical teams

**Skills to build:**
- Python with NumPy, pandas and PyTorch or TensorFlow
- Statistics and linear algebra
- Cloud ML platforms and model deployment
- Responsible AI practices

**Getting started:**
1. Learn the foundations (Python, statistics)
2. Build 3-5 portfolio projects on real datasets
3. Pick a focus: NLP, computer vision or generative AI
4. Join AI communities and local meetups

{goals_clause}Which area of AI interests you most? I can sketch a learning roadmap for it.""",

    """AI and machine learning are a strong choice right now, {name}!

{opening}

**Where AI talent is needed:**
- Healthcare: diagnostics and medical imaging
- Finance: fraud detection and risk models
- Retail: recommendations and forecasting
- Manufacturing: predictive maintenance

**A realistic 6-month plan:**
- Months 1-2: Python, data handling, statistics
- Months 3-4: core machine learning algorithms and a first project
- Months 5-6: a specialization plus a deployed end-to-end project

Employers care most about projects you can demonstrate. {topics_clause}What is your current background: technical, or coming from another field?""",
)

HEALTHCARE_TEMPLATES = (
    """Healthcare is one of the most rewarding and stable career fields, {name}!

**Paths worth exploring:**
- Clinical roles: nursing, physician assistant, therapy
- Health technology: health informatics, telehealth
- Research: clinical trials, public health
- Administration: healthcare management, compliance

**Next steps:**
1. Decide between patient-facing and behind-the-scenes work
2. Check the education and licensing each path requires
3. Shadow or volunteer to test your fit

{goals_clause}What aspect of healthcare interests you most: patient care, technology, research or administration?""",

    """The healthcare field offers real stability and growth, {name}. {opening}

Demand keeps rising for nurses, allied health professionals and people who can bridge medicine and technology. Many roles have entry points through certificates or associate degrees, with room to advance later.

{topics_clause}Are you looking at a clinical role, or at the business and technology side of healthcare?""",
)

FINANCE_TEMPLATES = (
    """Finance and business offer excellent career prospects, {name}!

**Popular directions:**
- Financial analysis and corporate finance
- Accounting and audit
- Investment management and banking
- Fintech, where finance meets software

**Skills that matter:**
- Excel and financial modeling
- Data analysis (SQL, Python or BI tools)
- Communication of numbers to non-specialists

Certifications such as CPA or CFA can accelerate progress. {goals_clause}What area interests you most: corporate finance, personal financial planning or investment management?""",

    """Business and finance suit analytical minds well, {name}. {opening}

1. **Foundation** - learn accounting basics and financial statements
2. **Tools** - spreadsheets, modeling and a BI tool
3. **Experience** - internships, case competitions or analyst roles
4. **Network** - professional associations and alumni groups

{topics_clause}Where are you starting from, and what role would you like to grow into?""",
)

PROGRAMMING_TEMPLATES = (
    """Excellent question about programming careers, {name}! As {persona_name}, I've seen the tech industry change a lot.

**Common paths:**
- Web development (frontend, backend, full stack)
- Mobile development
- Data engineering
- DevOps and cloud engineering

**How to get there:**
1. Pick one language and learn it well (Python or JavaScript are good starts)
2. Build projects that solve real problems
3. Put your code on GitHub and write about it
4. Contribute to open source or collaborate on team projects

{goals_clause}Which area of programming interests you most? Are you starting out or pivoting from another field?""",

    """Programming is one of the most versatile careers you can choose, {name}. {opening}

Employers look for problem-solving ability, clean code and evidence you can ship. A portfolio of 3-4 solid projects often matters more than credentials.

{topics_clause}What kind of software would you most like to build?""",
)

REMOTE_TEMPLATES = (
    """Remote work has changed careers for good, {name}!

**Remote-friendly fields:**
- Software development and IT
- Digital marketing and content
- Design and UX
- Customer success and operations
- Freelance consulting

**Succeeding remotely:**
- Communicate clearly in writing
- Manage your own time and priorities
- Keep a portfolio that shows results
- Build relationships deliberately, online and off

{goals_clause}Are you looking for full-time remote employment or freelance project work?""",

    """The shift to remote and freelance work is here to stay, {name}. {opening}

Start by identifying which of your skills can be delivered remotely, then build visible proof: case studies, testimonials and a professional online presence. Freelance platforms can help at first, but referrals grow faster over time.

{topics_clause}What kind of remote setup would suit you best?""",
)

ENTREPRENEUR_TEMPLATES = (
    """Entrepreneurship is one of the most rewarding, and challenging, career paths, {name}!

**Before you start:**
1. Validate the problem with real potential customers
2. Build the smallest version that delivers value
3. Work out how you will reach customers and charge them
4. Plan your finances and runway

**Skills that help:**
- Sales and communication
- Basic finance and budgeting
- Resilience and fast learning

{goals_clause}What kind of business are you thinking about?""",

    """Starting your own business is exciting, {name}. {opening}

Many founders begin with a side project while keeping a steady income, then scale once there is real traction. Mentors and local startup communities can save you expensive mistakes.

{topics_clause}Do you already have an idea, or are you still exploring?""",
)

GRADUATE_TEMPLATES = (
    """Congratulations on starting your career, {name}!

**First-job strategy:**
1. Target entry-level roles and graduate programs in 2-3 fields
2. Tailor your resume to each application
3. Use internships, projects and coursework as experience
4. Reach out to alumni for informational interviews

**Skills employers value in new graduates:**
- Communication and teamwork
- Willingness to learn
- Basic data and digital skills

{goals_clause}What field did you study, and what kind of role are you hoping for?""",

    """Being a recent graduate is a good position to be in, {name}. {opening}

Your first role is a learning platform, not a life sentence. Focus on environments where you will get feedback, mentorship and a range of experience.

{topics_clause}What are you most unsure about as you look for your first job?""",
)

SALARY_TEMPLATES = (
    """Compensation is an important part of career planning, {name}!

**Know your market value:**
- Research salary ranges for your role and location
- Factor in benefits, equity and flexibility
- Track your accomplishments with numbers

**Negotiation tips:**
1. Let the employer name a number first when you can
2. Anchor with a researched range
3. Negotiate the whole package, not only base pay
4. Stay professional and positive

{goals_clause}Are you preparing for an offer negotiation, or planning long-term earning growth?""",

    """Understanding pay is key to career success, {name}. {opening}

The biggest salary jumps usually come from building in-demand skills, moving into higher-value roles, or changing employers at the right time.

{topics_clause}What role and location should we look at?""",
)

TRENDS_TEMPLATES = (
    """The job market is changing fast, {name}. Here are the key trends shaping careers:

- **AI and automation** are changing tasks in almost every role
- **Green jobs** in energy and sustainability are growing
- **Healthcare** demand keeps rising
- **Remote and hybrid work** are now normal in many fields
- **Skills-based hiring** is replacing some degree requirements

{opening}

{goals_clause}Which industry or trend interests you most? I can go deeper on specific opportunities.""",

    """The future of work is being rewritten right now, {name}. {opening}

The most durable skills are adaptability, digital literacy, communication and the ability to keep learning. Roles that combine domain knowledge with technology are in especially high demand.

{topics_clause}What changes in your industry concern or interest you most?""",
)

WORK_LIFE_TEMPLATES = (
    """Work-life balance matters more than ever, {name}.

**Preventing burnout:**
- Set clear boundaries on working hours
- Protect time for rest and relationships
- Talk to your manager early about workload

**Growing without burning out:**
1. Choose one or two development goals per quarter
2. Learn through your current work where possible
3. Find a mentor who models the balance you want

{goals_clause}What feels most out of balance for you right now?""",

    """Professional growth and balance don't have to compete, {name}. {opening}

Intentional growth means choosing what to learn, saying no to low-value commitments and measuring progress over months, not days.

{topics_clause}What would a sustainable next step look like for you?""",
)

TRANSITION_TEMPLATES = (
    """Career transitions can be both exciting and overwhelming, {name}. I'm {persona_name}, and I help people through major career changes.

**A structured approach:**
1. **Assess** - your transferable skills, values and interests
2. **Explore** - research target roles and talk to people in them
3. **Bridge** - close skill gaps with courses, projects or volunteering
4. **Transition** - a side project, an internal move or a full switch

{goals_clause}What field are you coming from, and where would you like to go?""",

    """Changing direction is more common than ever, {name}. {opening}

The key is to build a bridge rather than jump: find roles that use your current strengths while moving you toward your new field.

{topics_clause}What is pulling you toward a change?""",
)

JOB_SEARCH_TEMPLATES = (
    """Job searching can feel like a full-time job itself, {name}! I'm {persona_name}, and I can help you make it more effective.

**Resume:**
- Lead with results and numbers
- Tailor keywords to each job description

**Search:**
- Combine applications with networking and referrals
- Keep a simple tracker of roles and follow-ups

**Interviews:**
- Prepare stories using the STAR method
- Research the company and prepare questions

{goals_clause}Which part of the process would you like to work on first?""",

    """The job search process has changed, {name}, but the fundamentals still hold. {opening}

Referrals, a focused resume and good interview preparation beat mass applications almost every time.

{topics_clause}Are you working on your resume, your search strategy or interview preparation?""",
)

GREETING_TEMPLATES = (
    """Hi {name}! I'm {persona_name}, your dedicated career counselor.

{history_clause}I can help you with:
- Exploring career paths
- Building skills and certifications
- Job search and interview preparation
- Career assessments and planning

What would you like to work on today?""",

    """Hello {name}! I'm {persona_name}. {persona_style}.

{history_clause}My specializations include {specializations}. Tell me a bit about where you are in your career and where you'd like to go.""",
)

HELP_TEMPLATES = (
    """I'd love to help you, {name}!

To give you the most useful guidance, tell me:
- Where you are now (studying, working, between roles)
- What you'd like to change or achieve
- Any fields or roles you're considering

{goals_clause}Then we can build an action plan together.""",

    """Absolutely, {name}! I'm here to support your career journey. {opening}

1. **Clarify** your goals
2. **Identify** the skills and experience you need
3. **Plan** concrete next steps with timelines

{topics_clause}Where would you like to start?""",
)

SHORT_TEMPLATES = (
    """Hi {name}! Your message was quite brief. To give you helpful career guidance, could you tell me more about what you're looking for?

For example:
- Are you exploring new career paths?
- Do you need help with skill development?
- Are you preparing for job interviews?
- Would you like career assessment recommendations?""",

    """Hello {name}! I'd love to help with your career development. What specific career topic interests you most right now?

- Career direction and planning
- Skill building and certifications
- Job search and interview preparation
- Career assessments""",

    """Hey {name}! I'm here to provide personalized career advice. Could you share more about your current situation and what you'd like to achieve?""",
)

CAREER_TEMPLATES = (
    """Hi {name}! I'm {persona_name}, and I'm glad to help you explore career opportunities.

{topics_clause}Here are some career exploration strategies:

1. **Self-assessment** - understand your strengths, interests and values
2. **Market research** - look at growing industries and roles
3. **Skill development** - identify the key skills for your target roles
4. **Networking** - connect with people working in your field

What aspect of career exploration interests you most right now?""",
)

SKILL_TEMPLATES = (
    """Great question about skill development, {name}!

{opening}

**High-demand skills:**
- Digital literacy and data analysis
- Communication and presentation
- Problem-solving and critical thinking
- Industry-specific technical skills

**Ways to build them:**
1. Online courses and certifications
2. Hands-on projects and a portfolio
3. Mentorship and peer learning
4. Workshops and conferences

{goals_clause}What career field are you building skills for?""",
)

ASSESSMENT_TEMPLATES = (
    """Assessment is a crucial step in career planning, {name}!

{opening}

**Types of career assessments:**
1. **Personality** - understand your work style
2. **Interests** - discover what motivates you
3. **Skills** - identify your strengths
4. **Values** - clarify what matters most in your work

**Next steps:**
- Complete a comprehensive career assessment
- Reflect on the results with guided questions
- Discuss the findings with a mentor or counselor

Would you like to start with a specific type of assessment?""",
)

DEFAULT_TEMPLATES = (
    """Hello {name}! I'm {persona_name}. {persona_style}.

{history_clause}I'm here to help you with:
- **Career exploration** - discovering new opportunities
- **Skill development** - building valuable capabilities
- **Goal setting** - creating actionable career plans
- **Industry insights** - understanding market trends

My specializations include {specializations}. What would you like to explore today?""",

    """Hi {name}! I'm {persona_name}, your career guidance companion.

Let me help you navigate your career journey with personalized advice. I can assist you with:
- Exploring career paths that match your interests
- Developing in-demand skills for your field
- Creating a strategic career roadmap
- Understanding current job market trends

{goals_clause}What specific area would you like to focus on today?""",

    """Welcome {name}! I'm {persona_name}, and I'm here to provide tailored career guidance.

{topics_clause}Areas I can help with:
- Career transition strategies
- Professional skill assessment
- Interview and networking preparation
- Long-term career planning

What career challenge or opportunity would you like to discuss first?""",
)

# Evaluated top to bottom, first match wins
OFFLINE_RULES: Tuple[Tuple[str, Predicate, Tuple[str, ...]], ...] = (
    ("ai", _contains("artificial intelligence", "machine learning", "ai career", "data science"), AI_TEMPLATES),
    ("healthcare", _contains("healthcare", "medical", "nurse", "doctor", "pharmacy"), HEALTHCARE_TEMPLATES),
    ("finance", _contains("finance", "business", "accounting", "investment", "banking"), FINANCE_TEMPLATES),
    ("programming", _contains("programming", "coding", "developer", "software"), PROGRAMMING_TEMPLATES),
    ("remote_work", _contains("remote work", "work from home", "digital nomad", "freelance"), REMOTE_TEMPLATES),
    ("entrepreneurship", _contains("entrepreneur", "startup", "business owner", "own business"), ENTREPRENEUR_TEMPLATES),
    ("graduate", _contains("recent graduate", "entry level", "new graduate", "first job", "college graduate"), GRADUATE_TEMPLATES),
    ("salary", _contains("salary", "compensation", "pay", "income", "money"), SALARY_TEMPLATES),
    ("trends", _contains("industry trends", "future of work", "job market", "employment outlook", "career outlook"), TRENDS_TEMPLATES),
    ("work_life", _contains("work life balance", "burnout", "stress", "professional development", "career growth"), WORK_LIFE_TEMPLATES),
    ("transition", _contains("transition", "change career", "switch", "pivot"), TRANSITION_TEMPLATES),
    ("job_search", _contains("interview", "job search", "resume", "application"), JOB_SEARCH_TEMPLATES),
    # Whole-word match only, so "this" or "ship" is not read as "hi"
    ("greeting", _words("hello", "hi", "hey"), GREETING_TEMPLATES),
    ("help", _contains("help", "advice", "guidance"), HELP_TEMPLATES),
    ("short", _is_short, SHORT_TEMPLATES),
    ("career", _contains("career", "profession"), CAREER_TEMPLATES),
    ("skill", _contains("skill", "learn"), SKILL_TEMPLATES),
    ("assessment", _contains("assess", "test", "evaluat"), ASSESSMENT_TEMPLATES),
    ("default", _always, DEFAULT_TEMPLATES),
)


@dataclass(frozen=True)
class OfflineRequest:
    """What the offline responder needs to build a reply."""
    message: str
    persona: Persona = PERSONAS[DEFAULT_PERSONA]
    memory: Optional[Memory] = None
    first_name: Optional[str] = None


def match_category(message: str) -> str:
    """Name of the first rule matching the message."""
    return _match(message)[0]


def _match(message: str) -> Tuple[str, Tuple[str, ...]]:
    text = (message or "").strip().lower()
    for category, predicate, templates in OFFLINE_RULES:
        if predicate(text):
            return category, templates
    # The default rule always matches
    return OFFLINE_RULES[-1][0], OFFLINE_RULES[-1][2]


class OfflineResponder:
    """
    Deterministic templated replies.

    Example:
        >>> responder = OfflineResponder()
        >>> reply = responder.respond(OfflineRequest("I'm curious about machine learning careers"))
        >>> "machine learning" in reply.lower()
        True
    """

    def respond(self, request: OfflineRequest) -> str:
        category, templates = _match(request.message)
        history_length = len(request.memory.trimmed_history) if request.memory else 0
        index = self.variant_index(request.message, history_length, len(templates))

        logger.info(f"Offline reply: category={category}, variant={index}")
        return templates[index].format(**self._fields(request)).strip()

    @staticmethod
    def variant_index(message: str, history_length: int, variant_count: int) -> int:
        """Stable variant choice for a message and history length."""
        if variant_count <= 1:
            return 0
        checksum = zlib.crc32((message or "").encode("utf-8"))
        return (checksum + history_length) % variant_count

    def _fields(self, request: OfflineRequest) -> dict:
        persona = request.persona
        memory = request.memory

        if "action-oriented" in persona.traits:
            opening = "Let's turn this into an action plan."
        elif "analytical" in persona.traits:
            opening = "Let's look at this step by step."
        elif "strategic" in persona.traits:
            opening = "Here is how the market looks from where I stand."
        else:
            opening = "Here's a practical way to approach it."

        topics_clause = ""
        goals_clause = ""
        history_clause = ""
        if memory is not None:
            if memory.mentioned_topics:
                recent = " and ".join(memory.mentioned_topics[-2:])
                topics_clause = f"Building on our earlier conversation about {recent}: "
            if memory.user_goals:
                goals_clause = f"Keeping your goal to {memory.user_goals[-1]} in mind: "
            if memory.trimmed_history:
                history_clause = "It's great to continue our conversation. "

        return {
            "name": request.first_name or "there",
            "persona_name": persona.name,
            "persona_style": persona.response_style,
            "specializations": ", ".join(persona.specializations),
            "opening": opening,
            "topics_clause": topics_clause,
            "goals_clause": goals_clause,
            "history_clause": history_clause,
        }
