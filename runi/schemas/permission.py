from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class PermissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    permission_key: str
    main_tab_key: str
    sub_tab_key: str
    action_key: str
    label: str
    description: Optional[str] = None
