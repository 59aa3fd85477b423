from fastapi import APIRouter
from datetime import datetime

from agents.base import agent_registry

router = APIRouter()

@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": "Atama AI Backend",
        "agents": agent_registry.list_agents()
    }

@router.get("/agents")
async def agents_info():
    """Name, version and configuration of every registered agent"""
    return agent_registry.get_agents_info()
