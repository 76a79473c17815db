from lokalise_mcp.core.command import COMMAND_EXAMPLE, parse_command


def test_parse_example_command():
    parsed = parse_command(COMMAND_EXAMPLE)
    assert parsed.project_name == "Watt"
    assert parsed.key_name == "hello"
    assert parsed.default_value == "sdfs"
    assert parsed.platforms == ["web", "ios"]
    assert parsed.is_complete


def test_parse_project_and_key_with_double_quotes():
    parsed = parse_command('Add a key to project name is "My Project" with key named "test_key"')
    assert parsed.project_name == "My Project"
    assert parsed.key_name == "test_key"
    assert not parsed.is_complete


def test_parse_single_quotes():
    parsed = parse_command("Add key named 'hello_world' to project name is 'Demo Project'")
    assert parsed.project_name == "Demo Project"
    assert parsed.key_name == "hello_world"


def test_parse_default_value():
    assert parse_command('Add key with default value is "Hello World"').default_value == "Hello World"


def test_parse_platforms():
    assert parse_command("Add key where platforms are web, ios, android").platforms == ["web", "ios", "android"]
    assert parse_command("Add key where platform is web").platforms == ["web"]


def test_parse_is_case_insensitive():
    parsed = parse_command('PROJECT NAME IS "Watt" KEY NAMED hello PLATFORMS ARE Web, IOS')
    assert parsed.project_name == "Watt"
    assert parsed.key_name == "hello"
    assert parsed.platforms == ["web", "ios"]


def test_parse_missing_information():
    parsed = parse_command("Just some random text")
    assert parsed.project_name is None
    assert parsed.key_name is None
    assert parsed.default_value is None
    assert parsed.platforms is None
    assert not parsed.is_complete


def test_parse_full_command():
    parsed = parse_command(
        'Add key named "welcome_message" to project name is "EducAide App" '
        'with default value is "Welcome to our app" where platforms are web, ios'
    )
    assert parsed.project_name == "EducAide App"
    assert parsed.key_name == "welcome_message"
    assert parsed.default_value == "Welcome to our app"
    assert parsed.platforms == ["web", "ios"]
