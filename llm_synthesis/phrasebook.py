"""Language phrasebooks for report prompts.

Every fixed sentence a prompt contains lives here, keyed by language, so
the prompt builders only decide *which* sentence to emit and *what* data
fills it.
"""

from typing import Dict

SUPPORTED_LANGUAGES = ("vi", "en")

_VI: Dict[str, str] = {
    # shared
    "audience.default": "người đọc không chuyên",
    "scope.national": "Phạm vi báo cáo: toàn quốc.",
    "scope.region": 'Phạm vi báo cáo: tỉnh/thành có mã "{province}". Nếu có tên trong dữ liệu thì sử dụng tên đó.',
    "output.header": "Yêu cầu định dạng đầu ra (bắt buộc):",
    "output.json_intro": "Trả lời DUY NHẤT dưới dạng JSON hợp lệ với cấu trúc sau:",
    "output.closing": "CHỈ trả về JSON. Không được dùng markdown, không dùng dấu ```, không kèm bất kỳ giải thích nào ngoài JSON.",
    "type.number": "số",
    "type.point_list": '[{"year": số, "projected": số}]',
    "label.unknown": "Không rõ",
    "label.urban": "Đô thị",
    "label.rural": "Nông thôn",
    "sex.M": "Nam",
    "sex.F": "Nữ",
    "direction.strong increase": "tăng mạnh",
    "direction.mild increase": "tăng nhẹ",
    "direction.stable": "ổn định",
    "direction.mild decrease": "giảm nhẹ",
    "direction.strong decrease": "giảm mạnh",
    "direction.unknown": "không rõ",
    "desc.summary": "Chuỗi mô tả 5–8 câu bằng tiếng Việt",
    "desc.highlights": "3 câu ngắn nêu điểm nổi bật",
    "desc.highlights_range": "3–5 câu ngắn nêu các điểm nổi bật",
    "desc.top_provinces": "Tên tỉnh có tỷ lệ cao",
    "desc.bottom_provinces": "Tên tỉnh có tỷ lệ thấp",
    # population
    "population.system": "Bạn là trợ lý tạo báo cáo thống kê dân số ngắn gọn bằng tiếng Việt dưới dạng JSON.",
    "population.role": "Bạn là chuyên gia thống kê dân số, nhiệm vụ là tạo báo cáo ngắn gọn (5–8 câu) bằng tiếng Việt dành cho {audience}.",
    "population.task": "Hãy dựa vào dữ liệu điều tra dân số năm {year} bên dưới để viết tóm tắt, liệt kê điểm nổi bật, và đưa ra dự báo dân số trong {years} năm tới.",
    "population.data_header": "Dữ liệu cung cấp (tóm tắt):",
    "population.top": "- Top 5 tỉnh/thành đông dân nhất: {items}.",
    "population.top_missing": "- Không có dữ liệu dân số theo tỉnh.",
    "population.trend": "- Xu hướng dân số: từ năm {first_year} ({first}) đến năm {last_year} ({last}).",
    "population.trend_missing": "- Không có dữ liệu xu hướng dân số.",
    "population.projection": "- Dự báo đã tính sẵn (tăng trưởng kép): tốc độ tăng bình quân {rate}%/năm, dân số năm {target_year} ước đạt {projected}. Hãy dùng đúng các con số này trong phần projection.",
    "population.projection_missing": "- Không đủ dữ liệu để tính dự báo (cần ít nhất 2 kỳ điều tra).",
    "population.age": "- Cơ cấu tuổi: {items}.",
    "population.age_missing": "- Không có dữ liệu cơ cấu tuổi.",
    "population.sex": "- Cơ cấu giới tính: {items}.",
    "population.sex_ratio": "- Tỷ số giới tính: {ratio} nam trên 100 nữ.",
    "population.sex_missing": "- Không có dữ liệu giới tính.",
    # urban / rural
    "urban_rural.system": "Bạn là trợ lý AI giúp phân tích dữ liệu dân số đô thị / nông thôn và viết báo cáo ngắn gọn bằng tiếng Việt.",
    "urban_rural.role": "Bạn là chuyên gia thống kê dân số, chuyên phân tích sự khác biệt giữa khu vực đô thị và nông thôn, viết cho {audience}.",
    "urban_rural.task": "Nhiệm vụ: dựa vào dữ liệu dân số và hộ gia đình năm {year} theo khu vực Đô thị / Nông thôn bên dưới, hãy viết một đoạn tóm tắt (5–8 câu), liệt kê 3 điểm nổi bật và đưa ra nhận định ngắn về xu hướng đô thị hóa.",
    "urban_rural.data_header": "Dữ liệu được cung cấp (đã tổng hợp):",
    "urban_rural.total_population": "- Tổng dân số: {value} người.",
    "urban_rural.total_households": "- Tổng số hộ gia đình: {value} hộ.",
    "urban_rural.item": "{area}: dân số {population} ({population_pct}%), hộ gia đình {households} ({household_pct}%)",
    "urban_rural.items": "- Cơ cấu theo khu vực: {items}.",
    "urban_rural.items_missing": "- Không có dữ liệu chi tiết theo khu vực.",
    # internet
    "internet.system": "Bạn là trợ lý AI giúp phân tích dữ liệu hạ tầng và phổ cập Internet và viết báo cáo ngắn gọn bằng tiếng Việt.",
    "internet.role": "Bạn là chuyên gia thống kê về hạ tầng và phổ cập Internet tại Việt Nam, viết cho {audience}.",
    "internet.task": "Nhiệm vụ: dựa trên dữ liệu về số hộ gia đình và số hộ có Internet, hãy viết một đoạn tóm tắt (5–8 câu) về mức độ phổ cập Internet, sự khác biệt giữa các địa phương, và xu hướng thay đổi theo thời gian.",
    "internet.scope_national": "Phạm vi chính: toàn quốc (so sánh giữa các tỉnh/thành).",
    "internet.data_header": "Dữ liệu tổng hợp hiện tại (năm {year}):",
    "internet.totals": "- Tổng số hộ gia đình: {households} hộ; trong đó có Internet: {with_internet} hộ (~{rate}%).",
    "internet.top": "- Nhóm tỉnh có tỷ lệ hộ có Internet cao: {items}.",
    "internet.bottom": "- Nhóm tỉnh có tỷ lệ hộ có Internet thấp (cần quan tâm): {items}.",
    "internet.trend_header": "Thông tin xu hướng (dựa trên dữ liệu nhiều kỳ điều tra):",
    "internet.trend": '- Giai đoạn từ {first_year} đến {last_year}, tỷ lệ hộ có Internet thay đổi từ {first_rate}% lên {last_rate}% (thay đổi {change} điểm phần trăm, trung bình {avg_change} điểm phần trăm mỗi kỳ, xu hướng được đánh giá là "{direction}").',
    "internet.trend_missing": "- Không đủ dữ liệu nhiều kỳ để đánh giá xu hướng.",
    # chat
    "chat.system": (
        "Bạn là trợ lý phân tích dữ liệu dân số Việt Nam. Nhiệm vụ của bạn gồm hai phần:"
        "\n1) Trả lời dựa trên dữ liệu JSON được cung cấp từ hệ thống thống kê."
        "\n2) Khi người dùng hỏi về chính sách, giải pháp hoặc gợi ý cải thiện, hãy đưa ra các chính sách khả thi, "
        "phù hợp bối cảnh Việt Nam, dựa trên kiến thức thực tế (giáo dục, kinh tế, xã hội, hạ tầng)."
        "\nHãy trả lời ngắn gọn (5–8 câu), dễ hiểu cho người không chuyên."
        "\nNếu dữ liệu không đủ để trả lời một phần, hãy kết hợp kiến thức chung và giải thích rõ."
    ),
    "chat.question": 'Người dùng hỏi: "{question}".',
    "chat.topic": "Chủ đề đã phân loại: {topic}. Năm mặc định: {year}.",
    "chat.intro": "Dưới đây là dữ liệu JSON rút gọn từ các API báo cáo của hệ thống. Hãy đọc kỹ và trả lời bằng tiếng Việt, 5–8 câu, dễ hiểu cho người không chuyên.",
    "chat.scope_region": 'Phạm vi: dữ liệu cho tỉnh/thành "{name}" (mã {code}).',
    "chat.scope_national": "Phạm vi: toàn quốc.",
    "chat.dataset.population_by_province": "Dữ liệu population_by_province:",
    "chat.dataset.population_trend": "Dữ liệu population_trend:",
    "chat.dataset.age_structure": "Dữ liệu age_structure (dân số theo nhóm tuổi):",
    "chat.dataset.sex_ratio": "Dữ liệu sex_ratio (dân số theo giới tính):",
    "chat.dataset.urban_rural": "Dữ liệu urban_rural (dân số và hộ theo khu vực):",
    "chat.dataset.internet_access": "Dữ liệu internet_access (tỷ lệ hộ có Internet theo tỉnh):",
    "chat.dataset.internet_trend": "Dữ liệu internet_trend (qua các kỳ điều tra):",
    "chat.task.population": "Nhiệm vụ: mô tả dân số theo tỉnh (top tỉnh đông dân), xu hướng dân số theo thời gian, nhận xét cơ cấu tuổi (dân số trẻ/già hoá) và phân bố giới tính (nam / nữ), và nếu có thể, nhận xét về sự tập trung dân số ở các đô thị lớn.",
    "chat.task.urban_rural": "Nhiệm vụ: so sánh quy mô hộ thành thị và nông thôn, nêu tỷ trọng mỗi khu vực, và nhận xét nếu có sự chênh lệch lớn giữa các tỉnh/thành.",
    "chat.task.internet": "Nhiệm vụ: tóm tắt mức độ phổ cập Internet của hộ gia đình, nêu xu hướng theo thời gian, và chỉ ra nếu có tỉnh/thành nào nổi bật.",
    "chat.requirements": (
        "Yêu cầu:\n"
        "- Trả lời bằng tiếng Việt, 5–8 câu, có thể dùng gạch đầu dòng nếu phù hợp.\n"
        "- Dẫn chiếu một vài con số cụ thể (giá trị gần đúng, không cần chính xác tuyệt đối).\n"
        "- Nếu dữ liệu không đủ để trả lời đúng ý câu hỏi, hãy nói rõ hạn chế đó."
    ),
    "chat.empty_reply": "Xin lỗi, tôi chưa có câu trả lời phù hợp.",
}

_EN: Dict[str, str] = {
    "audience.default": "non-specialist readers",
    "scope.national": "Report scope: nationwide.",
    "scope.region": 'Report scope: the province with code "{province}". Use the province name if it appears in the data.',
    "output.header": "Output format requirements (mandatory):",
    "output.json_intro": "Reply ONLY with valid JSON using this structure:",
    "output.closing": "Return JSON ONLY. No markdown, no ``` fences, no explanation outside the JSON.",
    "type.number": "number",
    "type.point_list": '[{"year": number, "projected": number}]',
    "label.unknown": "Unknown",
    "label.urban": "Urban",
    "label.rural": "Rural",
    "sex.M": "Male",
    "sex.F": "Female",
    "direction.strong increase": "strong increase",
    "direction.mild increase": "mild increase",
    "direction.stable": "stable",
    "direction.mild decrease": "mild decrease",
    "direction.strong decrease": "strong decrease",
    "direction.unknown": "unknown",
    "desc.summary": "5-8 sentence description in English",
    "desc.highlights": "3 short sentences with the key points",
    "desc.highlights_range": "3-5 short sentences with the key points",
    "desc.top_provinces": "Province with a high rate",
    "desc.bottom_provinces": "Province with a low rate",
    "population.system": "You are an assistant that produces concise statistical population reports in JSON.",
    "population.role": "You are a population statistics expert writing a concise report (5-8 sentences) in English for {audience}.",
    "population.task": "Use the {year} census data below to write a summary, list the highlights, and give a population projection for the next {years} years.",
    "population.data_header": "Provided data (summary):",
    "population.top": "- Top 5 most populous provinces: {items}.",
    "population.top_missing": "- No population-by-province data.",
    "population.trend": "- Population trend: from {first_year} ({first}) to {last_year} ({last}).",
    "population.trend_missing": "- No population trend data.",
    "population.projection": "- Precomputed projection (compound growth): average growth {rate}% per year, population in {target_year} estimated at {projected}. Use exactly these figures in the projection object.",
    "population.projection_missing": "- Not enough data for a projection (at least 2 census points are needed).",
    "population.age": "- Age structure: {items}.",
    "population.age_missing": "- No age structure data.",
    "population.sex": "- Sex breakdown: {items}.",
    "population.sex_ratio": "- Sex ratio: {ratio} males per 100 females.",
    "population.sex_missing": "- No sex breakdown data.",
    "urban_rural.system": "You are an AI assistant that analyses urban / rural population data and writes concise reports in English.",
    "urban_rural.role": "You are a population statistics expert specialising in urban versus rural differences, writing for {audience}.",
    "urban_rural.task": "Task: using the {year} population and household data by urban / rural area below, write a summary (5-8 sentences), list 3 highlights and give a short assessment of the urbanisation trend.",
    "urban_rural.data_header": "Provided data (aggregated):",
    "urban_rural.total_population": "- Total population: {value} people.",
    "urban_rural.total_households": "- Total households: {value}.",
    "urban_rural.item": "{area}: population {population} ({population_pct}%), households {households} ({household_pct}%)",
    "urban_rural.items": "- Breakdown by area: {items}.",
    "urban_rural.items_missing": "- No breakdown by area.",
    "internet.system": "You are an AI assistant that analyses internet infrastructure and access data and writes concise reports in English.",
    "internet.role": "You are a statistics expert on internet infrastructure and household access, writing for {audience}.",
    "internet.task": "Task: using the data on households and households with internet access, write a summary (5-8 sentences) on internet penetration, differences between provinces, and change over time.",
    "internet.scope_national": "Main scope: nationwide (comparison between provinces).",
    "internet.data_header": "Current aggregated data (year {year}):",
    "internet.totals": "- Total households: {households}; with internet: {with_internet} (~{rate}%).",
    "internet.top": "- Provinces with the highest household internet rate: {items}.",
    "internet.bottom": "- Provinces with the lowest household internet rate (need attention): {items}.",
    "internet.trend_header": "Trend information (based on several census rounds):",
    "internet.trend": '- From {first_year} to {last_year}, the household internet rate moved from {first_rate}% to {last_rate}% (change {change} percentage points, on average {avg_change} points per round, direction assessed as "{direction}").',
    "internet.trend_missing": "- Not enough rounds of data to assess the trend.",
    "chat.system": (
        "You are an assistant that analyses Vietnamese population data. Your job has two parts:"
        "\n1) Answer from the JSON data provided by the statistics system."
        "\n2) When the user asks about policies, solutions or improvements, propose feasible policies suited to "
        "the Vietnamese context, grounded in real-world knowledge (education, economy, society, infrastructure)."
        "\nKeep answers short (5-8 sentences) and easy for non-specialists to follow."
        "\nIf the data is not enough to answer part of the question, combine general knowledge and say so clearly."
    ),
    "chat.question": 'The user asks: "{question}".',
    "chat.topic": "Detected topic: {topic}. Default year: {year}.",
    "chat.intro": "Below are condensed JSON excerpts from the system's report APIs. Read them carefully and answer in English, 5-8 sentences, for non-specialists.",
    "chat.scope_region": 'Scope: data for the province "{name}" (code {code}).',
    "chat.scope_national": "Scope: nationwide.",
    "chat.dataset.population_by_province": "population_by_province data:",
    "chat.dataset.population_trend": "population_trend data:",
    "chat.dataset.age_structure": "age_structure data (population by age group):",
    "chat.dataset.sex_ratio": "sex_ratio data (population by sex):",
    "chat.dataset.urban_rural": "urban_rural data (population and households by area):",
    "chat.dataset.internet_access": "internet_access data (household internet rate by province):",
    "chat.dataset.internet_trend": "internet_trend data (across census rounds):",
    "chat.task.population": "Task: describe population by province (most populous provinces), the population trend over time, the age structure (young or ageing population) and the sex distribution, and if possible comment on concentration in large cities.",
    "chat.task.urban_rural": "Task: compare the size of urban and rural households, give each area's share, and comment on large gaps between provinces.",
    "chat.task.internet": "Task: summarise household internet penetration, describe the trend over time, and point out provinces that stand out.",
    "chat.requirements": (
        "Requirements:\n"
        "- Answer in English, 5-8 sentences, bullet points allowed where useful.\n"
        "- Quote a few concrete figures (approximate values are fine).\n"
        "- If the data is not enough to answer the question, say so."
    ),
    "chat.empty_reply": "Sorry, I do not have a suitable answer yet.",
}

_PHRASES: Dict[str, Dict[str, str]] = {"vi": _VI, "en": _EN}

_THOUSANDS_SEPARATOR = {"vi": ".", "en": ","}


class Phrasebook:
    """Fixed prompt phrases and number formatting for one language."""

    def __init__(self, language: str) -> None:
        if language not in _PHRASES:
            raise ValueError(
                f"Unsupported language '{language}'. Allowed values: {list(SUPPORTED_LANGUAGES)}."
            )
        self.language = language
        self._phrases = _PHRASES[language]

    def text(self, key: str, **values: object) -> str:
        """Return the phrase for *key*, formatted with *values*."""
        template = self._phrases[key]
        return template.format(**values) if values else template

    def count(self, value: float) -> str:
        """Format a head/household count with the language's thousands separator."""
        return f"{round(value):,}".replace(",", _THOUSANDS_SEPARATOR[self.language])

    def direction(self, direction: str) -> str:
        return self._phrases.get(f"direction.{direction}", direction)

    def sex(self, code: str) -> str:
        return self._phrases.get(f"sex.{code}", code or self.text("label.unknown"))

    def area_labels(self) -> Dict[str, str]:
        return {
            "urban": self.text("label.urban"),
            "rural": self.text("label.rural"),
            "unknown": self.text("label.unknown"),
        }
