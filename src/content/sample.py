"""
Sample content used when no catalog file is configured.

Ids line up with the checkpoint snapshots in src.content.checkpoints.
"""

from __future__ import annotations

from src.content.catalog import (
    ContentCatalog,
    Difficulty,
    LessonDefinition,
    SimulationDefinition,
    SimulationOption,
    SimulationStep,
    TaskDefinition,
)

CAPSTONE_TASK_ID = "t-capstone"
CAPSTONE_SIMULATION_ID = "water-management"

SAMPLE_TASKS = (
    TaskDefinition(id="t-digital-footprint", title="Map your digital footprint", difficulty=Difficulty.EASY),
    TaskDefinition(id="t-spreadsheet-budget", title="Build a household budget sheet", difficulty=Difficulty.EASY),
    TaskDefinition(id="t-data-cleaning", title="Clean the city transport dataset", difficulty=Difficulty.MEDIUM),
    TaskDefinition(id="t-survey-design", title="Design a neighbourhood survey", difficulty=Difficulty.MEDIUM),
    TaskDefinition(id="t-dashboard", title="Publish an air-quality dashboard", difficulty=Difficulty.MEDIUM),
    TaskDefinition(id="t-sdg-research", title="Research brief for an SDG target", difficulty=Difficulty.HARD),
    TaskDefinition(id="t-team-prototype", title="Team prototype sprint", difficulty=Difficulty.HARD),
    TaskDefinition(id=CAPSTONE_TASK_ID, title="Capstone project", difficulty=Difficulty.HARD, xp_reward=400),
)

SAMPLE_LESSONS = (
    LessonDefinition(id="l-what-is-data", title="What is data?", xp_reward=30),
    LessonDefinition(id="l-charts", title="Choosing the right chart"),
    LessonDefinition(id="l-python-intro", title="First steps in Python", xp_reward=75),
    LessonDefinition(id="l-ethics", title="Data ethics"),
    LessonDefinition(id="l-presenting", title="Presenting your findings"),
)

SAMPLE_SIMULATIONS = (
    SimulationDefinition(
        id="climate-crisis",
        title="Climate crisis scenario",
        description="Cut the city's carbon emissions by 2050 without breaking the budget.",
        xp_cap=300,
        steps=(
            SimulationStep(
                id="step-1",
                title="Public transport reform",
                description="The transport network needs modernising. Which strategy do you follow?",
                options=(
                    SimulationOption(
                        id="opt-1-a",
                        text="Replace every bus with an electric one (high cost)",
                        score_impact=20,
                        feedback="Great for the environment, but the budget is strained.",
                    ),
                    SimulationOption(
                        id="opt-1-b",
                        text="Expand and subsidise bike lanes (low cost)",
                        score_impact=15,
                        feedback="Good for health and the climate, with slower payoff.",
                    ),
                    SimulationOption(
                        id="opt-1-c",
                        text="Keep the current system, maintenance only",
                        score_impact=-10,
                        feedback="Status quo kept; the emission target slips away.",
                    ),
                ),
            ),
            SimulationStep(
                id="step-2",
                title="Energy sources",
                description="How will you meet the city's growing energy demand?",
                options=(
                    SimulationOption(
                        id="opt-2-a",
                        text="Build renewable power plants",
                        score_impact=25,
                        feedback="Clean supply for decades, paid for up front.",
                    ),
                    SimulationOption(
                        id="opt-2-b",
                        text="Retrofit public buildings for efficiency",
                        score_impact=5,
                        feedback="Cheap and steady, but demand keeps rising.",
                    ),
                    SimulationOption(
                        id="opt-2-c",
                        text="Sign a new coal contract",
                        score_impact=-25,
                        feedback="Cheap today, expensive for everyone tomorrow.",
                    ),
                ),
            ),
            SimulationStep(
                id="step-3",
                title="Citizen engagement",
                description="How do you keep residents on board?",
                options=(
                    SimulationOption(
                        id="opt-3-a",
                        text="Open participatory budgeting",
                        score_impact=15,
                        feedback="Residents own the plan.",
                    ),
                    SimulationOption(
                        id="opt-3-b",
                        text="Run an awareness campaign",
                        score_impact=5,
                        feedback="People know more, but few act.",
                    ),
                    SimulationOption(
                        id="opt-3-c",
                        text="Decide behind closed doors",
                        score_impact=-20,
                        feedback="Trust drops and the plan stalls.",
                    ),
                ),
            ),
        ),
    ),
    SimulationDefinition(
        id=CAPSTONE_SIMULATION_ID,
        title="Water management",
        description="Keep the city's reservoirs healthy through a drought year.",
        xp_cap=500,
        steps=(
            SimulationStep(
                id="step-1",
                title="Drought warning",
                options=(
                    SimulationOption(id="opt-1-a", text="Introduce tiered water pricing", score_impact=20),
                    SimulationOption(id="opt-1-b", text="Ask residents to save voluntarily", score_impact=0),
                    SimulationOption(id="opt-1-c", text="Ignore the forecast", score_impact=-30),
                ),
            ),
            SimulationStep(
                id="step-2",
                title="Infrastructure",
                options=(
                    SimulationOption(id="opt-2-a", text="Fix leaking mains first", score_impact=30),
                    SimulationOption(id="opt-2-b", text="Build a new dam", score_impact=-10),
                ),
            ),
        ),
    ),
)


def sample_catalog() -> ContentCatalog:
    """Catalog with the sample tasks, lessons and simulations."""
    return ContentCatalog(SAMPLE_TASKS, SAMPLE_LESSONS, SAMPLE_SIMULATIONS)
