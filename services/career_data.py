"""Static catalogs: assessment questions and career paths."""
from dataclasses import dataclass


CATEGORIES = ("analytical", "technical", "creative", "communication", "leadership")
MAX_OPTION_VALUE = 5


@dataclass(frozen=True)
class AssessmentQuestion:
    id: str
    category: str
    text: str
    options: tuple  # ((label, value), ...)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "text": self.text,
            "options": [{"label": label, "value": value} for label, value in self.options],
        }


@dataclass(frozen=True)
class CareerPath:
    id: str
    title: str
    icon: str
    description: str
    required_skills: tuple
    weights: dict

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "icon": self.icon,
            "description": self.description,
            "requiredSkills": list(self.required_skills),
            "assessmentWeights": dict(self.weights),
        }


CAREER_PATHS = (
    CareerPath(
        id="data-analyst",
        title="Data Analyst",
        icon="📊",
        description="Transform data into actionable insights using SQL, Excel, Python, and BI tools.",
        required_skills=("SQL", "Python", "Excel", "Power BI", "Tableau", "Statistics", "Data Visualization"),
        weights={"analytical": 0.35, "technical": 0.30, "creative": 0.10, "communication": 0.15, "leadership": 0.10},
    ),
    CareerPath(
        id="web-developer",
        title="Web Developer",
        icon="🌐",
        description="Build responsive web applications with modern JavaScript frameworks.",
        required_skills=("HTML", "CSS", "JavaScript", "React", "Node.js", "TypeScript", "REST APIs"),
        weights={"analytical": 0.20, "technical": 0.40, "creative": 0.25, "communication": 0.10, "leadership": 0.05},
    ),
    CareerPath(
        id="ai-engineer",
        title="AI / ML Engineer",
        icon="🤖",
        description="Design and deploy machine learning models and AI-powered systems.",
        required_skills=("Python", "TensorFlow", "PyTorch", "Machine Learning", "Deep Learning", "NLP", "Data Science"),
        weights={"analytical": 0.35, "technical": 0.40, "creative": 0.15, "communication": 0.05, "leadership": 0.05},
    ),
    CareerPath(
        id="ui-ux-designer",
        title="UI/UX Designer",
        icon="🎨",
        description="Create intuitive user experiences through research, prototyping, and design systems.",
        required_skills=("Figma", "Adobe XD", "User Research", "Wireframing", "Prototyping", "CSS", "Design Thinking"),
        weights={"analytical": 0.15, "technical": 0.15, "creative": 0.45, "communication": 0.20, "leadership": 0.05},
    ),
    CareerPath(
        id="product-manager",
        title="Product Manager",
        icon="🚀",
        description="Lead product strategy, roadmaps, and cross-functional teams to ship great products.",
        required_skills=("Product Strategy", "Agile", "Roadmapping", "User Research", "SQL", "Communication", "Leadership"),
        weights={"analytical": 0.20, "technical": 0.10, "creative": 0.20, "communication": 0.25, "leadership": 0.25},
    ),
    CareerPath(
        id="devops-engineer",
        title="DevOps Engineer",
        icon="⚙️",
        description="Streamline CI/CD pipelines, cloud infrastructure, and system reliability.",
        required_skills=("Docker", "Kubernetes", "AWS", "CI/CD", "Linux", "Shell Scripting", "Terraform"),
        weights={"analytical": 0.25, "technical": 0.50, "creative": 0.05, "communication": 0.10, "leadership": 0.10},
    ),
    CareerPath(
        id="cybersecurity",
        title="Cybersecurity Analyst",
        icon="🔒",
        description="Protect systems and data through threat analysis, penetration testing, and incident response.",
        required_skills=("Network Security", "Ethical Hacking", "SIEM", "Cryptography", "Linux", "Python", "Compliance"),
        weights={"analytical": 0.35, "technical": 0.40, "creative": 0.05, "communication": 0.10, "leadership": 0.10},
    ),
    CareerPath(
        id="mobile-developer",
        title="Mobile Developer",
        icon="📱",
        description="Build native and cross-platform mobile apps for iOS and Android.",
        required_skills=("React Native", "Flutter", "Swift", "Kotlin", "REST APIs", "Firebase", "UI/UX principles"),
        weights={"analytical": 0.20, "technical": 0.45, "creative": 0.20, "communication": 0.10, "leadership": 0.05},
    ),
)


ASSESSMENT_QUESTIONS = (
    AssessmentQuestion(
        id="q1",
        category="analytical",
        text="When faced with a complex problem, you prefer to:",
        options=(
            ("Break it into smaller parts and analyze each", 5),
            ("Look for patterns from past experiences", 4),
            ("Discuss with others to brainstorm together", 3),
            ("Jump into solutions and iterate", 2),
        ),
    ),
    AssessmentQuestion(
        id="q2",
        category="technical",
        text="How comfortable are you writing code or working with technical tools?",
        options=(
            ("Very comfortable, I code daily", 5),
            ("Comfortable, I can build projects independently", 4),
            ("Somewhat comfortable, still learning", 3),
            ("Prefer low-code / no-code tools", 2),
        ),
    ),
    AssessmentQuestion(
        id="q3",
        category="creative",
        text="When working on a project, you tend to:",
        options=(
            ("Focus on the aesthetic and user experience", 5),
            ("Innovate with new ideas and approaches", 4),
            ("Follow established best practices", 3),
            ("Prioritize efficiency and performance", 2),
        ),
    ),
    AssessmentQuestion(
        id="q4",
        category="communication",
        text="How do you prefer to share your work and ideas?",
        options=(
            ("Presentations and written reports", 5),
            ("Visual demos and prototypes", 4),
            ("Code / technical documentation", 3),
            ("One-on-one conversations", 2),
        ),
    ),
    AssessmentQuestion(
        id="q5",
        category="leadership",
        text="In a team project, you naturally:",
        options=(
            ("Take charge and coordinate everyone", 5),
            ("Mentor others and review their work", 4),
            ("Execute tasks assigned to you very well", 3),
            ("Work independently on your piece", 2),
        ),
    ),
    AssessmentQuestion(
        id="q6",
        category="analytical",
        text="Which activity excites you the most?",
        options=(
            ("Exploring data to find hidden trends", 5),
            ("Building and deploying systems", 3),
            ("Designing intuitive user interfaces", 2),
            ("Planning product strategy", 4),
        ),
    ),
    AssessmentQuestion(
        id="q7",
        category="technical",
        text="How often do you learn new programming languages or tools?",
        options=(
            ("Constantly, I enjoy learning new stacks", 5),
            ("Often, when a project demands it", 4),
            ("Sometimes, I master what I know first", 3),
            ("Rarely, prefer using familiar tools", 2),
        ),
    ),
    AssessmentQuestion(
        id="q8",
        category="creative",
        text="Which best describes your ideal work output?",
        options=(
            ("A beautiful, polished interface", 5),
            ("An elegant algorithm or model", 4),
            ("A scalable, reliable system", 3),
            ("A clear strategy document or roadmap", 2),
        ),
    ),
    AssessmentQuestion(
        id="q9",
        category="communication",
        text="When explaining technical concepts, you:",
        options=(
            ("Simplify for non-technical audiences naturally", 5),
            ("Use diagrams and visuals", 4),
            ("Prefer technical accuracy over simplification", 3),
            ("Avoid explaining, let the code speak", 1),
        ),
    ),
    AssessmentQuestion(
        id="q10",
        category="leadership",
        text="Your long-term career goal is:",
        options=(
            ("Leading a team or founding a startup", 5),
            ("Becoming a domain expert / architect", 4),
            ("Working across different departments", 3),
            ("Deep specialist in one technology", 2),
        ),
    ),
)
