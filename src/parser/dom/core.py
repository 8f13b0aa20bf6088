from typing import Dict, List, Optional, Any
from pydantic import BaseModel, ConfigDict, Field


class DomNode(BaseModel):
    """
    Serializable data model of one element in the parsed DOM tree.

    Dumped with aliases it yields the public JSON shape
    {"tagName", "attributes", "text"?, "children"?}.
    """
    model_config = ConfigDict(populate_by_name=True)

    tag_name: str = Field(alias="tagName")
    attributes: Dict[str, str] = Field(default_factory=dict)
    text: Optional[str] = None
    children: List['DomNode'] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Dumps the node, leaving out an absent text and an empty children list."""
        data: Dict[str, Any] = {"tagName": self.tag_name, "attributes": dict(self.attributes)}
        if self.text:
            data["text"] = self.text
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data
