import json
import logging
import os
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .allocator import Allocator
from .commands import Command, describe
from .config import configure_logging, load_settings
from .executor import CommandExecutor
from .interpreter import CommandInterpreter
from .models import (
    AllocationResult,
    Conflict,
    DomainModel,
    EntitySnapshot,
    PlacementFailure,
    ScheduleEntry,
    find_conflicts,
)
from .validation import ScheduleReport, validate_schedule

settings = load_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

interpreter = CommandInterpreter(lunch_slot=settings.lunch_slot)

app = FastAPI(title="Timetable Engine")

# CORS setup (simplified for dev)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # allows all origins in dev
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/response models; camelCase on the wire like the domain types
class GenerateRequest(DomainModel):
    snapshot: EntitySnapshot
    seed: Optional[int] = None
    strategy: Optional[Literal["cp-sat", "random"]] = None


class GenerateResponse(DomainModel):
    entries: List[ScheduleEntry]
    failures: List[PlacementFailure]
    strategy: str
    conflicts: List[Conflict]
    report: ScheduleReport


class ParseRequest(BaseModel):
    text: str


class ParseResponse(DomainModel):
    understood: bool
    command: Optional[Command] = None
    description: Optional[str] = None


class CommandRequest(DomainModel):
    text: str
    schedule: List[ScheduleEntry]
    snapshot: EntitySnapshot


class CommandResponse(DomainModel):
    understood: bool
    command: Optional[Command] = None
    schedule: List[ScheduleEntry]
    error: Optional[str] = None
    failures: List[PlacementFailure] = []


def _allocator_for(seed: Optional[int], strategy: Optional[str]) -> Allocator:
    allocator = Allocator.from_settings(settings, seed=seed)
    if strategy is not None:
        allocator.strategy = strategy
    return allocator


@app.post("/generate", response_model=GenerateResponse)
async def generate(request: GenerateRequest):
    try:
        result: AllocationResult = _allocator_for(request.seed, request.strategy).generate_from(
            request.snapshot
        )
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=f"Allocation Error: {ve}")
    except Exception as e:
        logger.exception("Allocation failed")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")
    return GenerateResponse(
        entries=result.entries,
        failures=result.failures,
        strategy=result.strategy,
        conflicts=find_conflicts(result.entries),
        report=validate_schedule(result.entries, request.snapshot.subjects, request.snapshot.timeslots),
    )


@app.post("/parse", response_model=ParseResponse)
async def parse(request: ParseRequest):
    command = interpreter.parse(request.text)
    if command is None:
        return ParseResponse(understood=False)
    return ParseResponse(understood=True, command=command, description=describe(command))


@app.post("/command", response_model=CommandResponse)
async def apply_command(request: CommandRequest):
    command = interpreter.parse(request.text)
    if command is None:
        # Not understood is not an error; the caller picks a fallback
        return CommandResponse(understood=False, schedule=request.schedule)
    executor = CommandExecutor.from_settings(settings, snapshot=request.snapshot)
    try:
        result = executor.apply(request.schedule, command, request.snapshot.timeslots)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=f"Command Error: {ve}")
    except Exception as e:
        logger.exception("Command %r failed", request.text)
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")
    return CommandResponse(
        understood=True,
        command=command,
        schedule=result.schedule,
        error=result.error,
        failures=list(result.failures),
    )


@app.get("/")
async def read_root():
    return {"message": "Timetable Engine API"}


@app.get("/example")
async def example_snapshot():
    path = os.path.join(os.path.dirname(__file__), "example.json")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
