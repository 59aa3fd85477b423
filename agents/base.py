# server/agents/base.py
"""
Base agent class for all AI agents in the system
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic, List
from pydantic import BaseModel
import logging
from datetime import datetime

from core.config import get_settings
from core.exceptions import AgentError

# Type variables for generic typing
RequestType = TypeVar('RequestType', bound=BaseModel)
ResponseType = TypeVar('ResponseType', bound=BaseModel)

class BaseAgent(ABC, Generic[RequestType, ResponseType]):
    """
    Base class for all AI agents

    Provides common functionality like:
    - Configuration management
    - Error handling with fallback responses
    - Logging
    - Health reporting
    """

    version = "1.0.0"

    def __init__(self, agent_name: str):
        self.agent_name = agent_name
        self.settings = get_settings()
        self.config = self.settings.get_agent_config(agent_name)
        self.logger = logging.getLogger(f"agents.{agent_name}")

        self._validate_config()

        self.logger.info(f"Initialized {agent_name} agent")

    @abstractmethod
    def _validate_config(self) -> None:
        """Validate agent-specific configuration"""
        pass

    @abstractmethod
    async def process_request(self, request: RequestType) -> ResponseType:
        """Process agent request - must be implemented by subclasses"""
        pass

    @abstractmethod
    def get_fallback_response(self, request: RequestType, error: Exception) -> ResponseType:
        """Get fallback response when agent fails"""
        pass

    async def execute(self, request: RequestType) -> ResponseType:
        """
        Main execution method with error handling

        Failures inside ``process_request`` are logged and answered with the
        agent's fallback response. ``AgentError`` is raised only when the
        fallback cannot be built either.
        """
        start_time = datetime.now()

        try:
            self.logger.info(f"Processing {self.agent_name} request")
            response = await self.process_request(request)

            execution_time = (datetime.now() - start_time).total_seconds()
            self.logger.info(f"Request processed in {execution_time:.2f}s")

            return response

        except Exception as e:
            self.logger.error(f"Error processing request: {e}", exc_info=True)

            try:
                fallback_response = self.get_fallback_response(request, e)
                self.logger.info("Returned fallback response")
                return fallback_response
            except Exception as fallback_error:
                self.logger.error(f"Fallback also failed: {fallback_error}")
                raise AgentError(f"{self.agent_name} agent failed: {e}") from e

    def _health_details(self) -> Dict[str, Any]:
        """Extra fields merged into the health report"""
        return {}

    async def health_check(self) -> Dict[str, Any]:
        """Agent health check"""
        try:
            self._validate_config()

            return {
                "agent": self.agent_name,
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "config_valid": True,
                **self._health_details()
            }
        except Exception as e:
            return {
                "agent": self.agent_name,
                "status": "unhealthy",
                "timestamp": datetime.now().isoformat(),
                "error": str(e),
                "config_valid": False
            }

    def get_agent_info(self) -> Dict[str, Any]:
        """Get agent information"""
        return {
            "name": self.agent_name,
            "version": self.version,
            "config": self.config,
            "description": self.__class__.__doc__ or f"{self.agent_name} agent"
        }

class AgentRegistry:
    """Registry for managing multiple agents"""

    def __init__(self):
        self._agents: Dict[str, BaseAgent] = {}
        self.logger = logging.getLogger("agents.registry")

    def register(self, agent: BaseAgent) -> None:
        """Register an agent"""
        self._agents[agent.agent_name] = agent
        self.logger.info(f"Registered agent: {agent.agent_name}")

    def unregister(self, agent_name: str) -> None:
        """Remove an agent, ignoring unknown names"""
        self._agents.pop(agent_name, None)

    def get(self, agent_name: str) -> Optional[BaseAgent]:
        """Get agent by name"""
        return self._agents.get(agent_name)

    def list_agents(self) -> List[str]:
        """List all registered agent names"""
        return list(self._agents.keys())

    async def health_check_all(self) -> Dict[str, Any]:
        """Health check all agents"""
        results = {}
        for name, agent in self._agents.items():
            results[name] = await agent.health_check()
        return results

    def get_agents_info(self) -> Dict[str, Any]:
        """Get information about all agents"""
        return {
            name: agent.get_agent_info()
            for name, agent in self._agents.items()
        }

# Global agent registry
agent_registry = AgentRegistry()
