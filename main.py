from rich.pretty import pprint

from clparams import *

provider = ParameterProvider(shell=True, fancy=True)

verbose = provider.define_flag_parameter("--verbose", "-v", description="chatty output")
count = provider.define_integer_parameter("--max-count", "-n", description="stop after N items", argument_name="NUMBER")
tags = provider.define_string_list_parameter("--tag", "-t", description="tags to apply", argument_name="TAG")
mode = provider.define_choice_parameter(
    "--mode",
    description="build mode",
    alternatives=["debug", "release"],
    default_value="debug",
)


if __name__ == '__main__':
    provider.process_parsed_data({
        verbose._parser_key: True,
        tags._parser_key: ["x", "y"],
    })
    pprint(provider, expand_all=True)
