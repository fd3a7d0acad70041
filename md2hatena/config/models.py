from pydantic import BaseModel, Field
from typing import Literal


class HackMDConfig(BaseModel):
    api_token_env: str = "HACKMD_APITOKEN"
    cookie_env: str = "HACKMD_COOKIE"


class HatenaConfig(BaseModel):
    username_env: str = "HATENA_ID"
    api_key_env: str = "HATENA_API_KEY"


class Md2HatenaConfig(BaseModel):
    # If 3, `#` becomes `###` and `##` becomes `####`
    heading_min: int = Field(default=1, ge=1, le=6)
    download_dir: str = "./.md2hatena-imgs"
    timeout: int = Field(default=10, gt=0)
    image_cache: str = ""
    codeblock: Literal["pure", "highlightjs", "highlight.js"] = "pure"
    resolve: bool = True
    hackmd: HackMDConfig = Field(default_factory=HackMDConfig)
    hatena: HatenaConfig = Field(default_factory=HatenaConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "warn"
