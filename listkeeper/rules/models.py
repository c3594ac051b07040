from pathlib import Path

from pydantic import BaseModel, Field, IPvAnyAddress, field_validator


class ServerRules(BaseModel):
    base_server_ip: IPvAnyAddress
    base_server_public_ip: IPvAnyAddress | None = None

class SystemRules(BaseModel):
    user_prefix: str = "vu"
    user_min_uid: int = Field(default=2000, ge=0)

class StoreRules(BaseModel):
    db_path: Path

class MailmanRules(BaseModel):
    bin_dir: Path = Path("/usr/lib/mailman/bin")
    change_pw_bin_dir: Path = Path("/var/lib/mailman/bin")
    enabled_lists_dir: Path = Path("/var/lib/mailman/lists")
    disabled_lists_dir: Path = Path("/var/cache/listkeeper/mailman/disabled.lists")
    delivery_target: str = "mailman:"
    discard_target: str = "/dev/null"
    command_timeout_seconds: float | None = 300

class PostfixRules(BaseModel):
    work_dir: Path
    backup_dir: Path
    transport_hash: Path
    virtual_mailbox_hash: Path
    postmap_command: list[str] = ["postmap"]
    reload_command: list[str] = ["postfix", "reload"]

class ApacheRules(BaseModel):
    sites_dir: Path = Path("/etc/apache2/sites-available")
    enable_site_command: list[str] = ["a2ensite", "-q"]
    disable_site_command: list[str] = ["a2dissite", "-q"]
    reload_command: list[str] = ["apache2ctl", "graceful"]

class DnsRules(BaseModel):
    owner: str = "listkeeper_mailman"
    hostname_prefix: str = "lists"

    @field_validator("owner")
    @classmethod
    def owner_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("dns.owner must not be blank")
        return v

class Rules(BaseModel):
    server: ServerRules
    system: SystemRules = SystemRules()
    store: StoreRules
    mailman: MailmanRules = MailmanRules()
    postfix: PostfixRules
    apache: ApacheRules = ApacheRules()
    dns: DnsRules = DnsRules()
